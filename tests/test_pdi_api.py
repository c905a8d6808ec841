from hrtalent.models.development_plan import DevelopmentPlan


def _item(**overrides):
    item = {
        "competencia": "Liderança",
        "resultadosEsperados": "Conduzir reuniões de time",
        "comoDesenvolver": "Mentoria quinzenal",
        "calendarizacao": "Q3",
        "status": "1",
        "observacao": "",
        "prazo": "curto",
    }
    item.update(overrides)
    return item


def test_save_and_read_pdi(client, leader_user, employee, auth_headers):
    headers = auth_headers(leader_user)
    response = client.post(
        "/api/pdi",
        json={
            "employeeId": employee.id,
            "items": [
                _item(),
                _item(competencia="Arquitetura", prazo="medio", status="5"),
                _item(competencia="Inglês", prazo="longo", status="3"),
                _item(competencia="SQL", prazo="curto", status="5"),
            ],
        },
        headers=headers,
    )
    assert response.status_code == 201
    saved = response.json()["data"]
    assert saved["status"] == "active"
    assert saved["periodo"] == "Anual"

    plan = client.get(f"/api/pdi/{employee.id}", headers=auth_headers(employee)).json()["data"]
    assert plan["id"] == saved["id"]
    assert plan["employeeName"] == "Ana Souza"
    assert [i["competencia"] for i in plan["byTerm"]["curtosPrazos"]] == ["Liderança", "SQL"]
    assert len(plan["byTerm"]["mediosPrazos"]) == 1
    assert plan["stats"]["total"] == 4
    assert plan["stats"]["concluidos"] == 2
    assert plan["stats"]["naoIniciados"] == 1
    assert plan["stats"]["percentualConclusao"] == 50


def test_new_plan_replaces_active_one(client, db_session, leader_user, employee, auth_headers):
    headers = auth_headers(leader_user)
    first = client.post("/api/pdi", json={"employeeId": employee.id, "items": [_item()]}, headers=headers)
    second = client.post(
        "/api/pdi",
        json={"employeeId": employee.id, "items": [_item(competencia="Negociação")], "periodo": "Semestral"},
        headers=headers,
    )
    assert second.status_code == 201

    statuses = {
        p.id: p.status
        for p in db_session.query(DevelopmentPlan).filter(DevelopmentPlan.employee_id == employee.id)
    }
    assert statuses == {first.json()["data"]["id"]: "completed", second.json()["data"]["id"]: "active"}

    active = client.get(f"/api/pdi/{employee.id}", headers=headers).json()["data"]
    assert active["periodo"] == "Semestral"
    assert active["items"][0]["competencia"] == "Negociação"


def test_grouped_payload(client, leader_user, employee, auth_headers):
    response = client.post(
        "/api/pdi",
        json={
            "employeeId": employee.id,
            "curtosPrazos": [
                {
                    "competencia": "Feedback",
                    "resultadosEsperados": "Dar feedback semanal",
                    "comoDesenvolver": "Treinamento",
                    "calendarizacao": "Mensal",
                },
            ],
            "longosPrazos": [
                {
                    "competencia": "Gestão",
                    "resultadosEsperados": "Liderar uma squad",
                    "comoDesenvolver": "Job rotation",
                    "calendarizacao": "2025",
                    "status": "2",
                },
            ],
        },
        headers=auth_headers(leader_user),
    )
    assert response.status_code == 201
    items = response.json()["data"]["items"]
    assert [(i["prazo"], i["status"]) for i in items] == [("curto", "1"), ("longo", "2")]
    assert all(i["id"] for i in items)


def test_missing_items(client, leader_user, employee, auth_headers):
    response = client.post("/api/pdi", json={"employeeId": employee.id, "items": []}, headers=auth_headers(leader_user))
    assert response.status_code == 400
    assert response.json()["error"] == "Campos obrigatórios: employeeId e items (array não vazio)"


def test_invalid_status(client, leader_user, employee, auth_headers):
    response = client.post(
        "/api/pdi", json={"employeeId": employee.id, "items": [_item(status="6")]}, headers=auth_headers(leader_user)
    )
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PDI_ITEMS"


def test_unrecognised_term(client, leader_user, employee, auth_headers):
    response = client.post(
        "/api/pdi", json={"employeeId": employee.id, "items": [_item(prazo="anual")]}, headers=auth_headers(leader_user)
    )
    assert response.status_code == 400
    assert response.json()["error"] == "O PDI deve conter pelo menos um item em algum prazo (curto, médio ou longo)"


def test_unknown_employee(client, leader_user, auth_headers):
    response = client.post("/api/pdi", json={"employeeId": 999999, "items": [_item()]}, headers=auth_headers(leader_user))
    assert response.status_code == 404


def test_no_active_plan(client, employee, auth_headers):
    response = client.get(f"/api/pdi/{employee.id}", headers=auth_headers(employee))
    assert response.json() == {"success": True, "data": None}


def test_plans_by_cycle(client, db_session, leader_user, employee, auth_headers):
    from datetime import date
    from hrtalent.models.evaluation import EvaluationCycle

    cycle = EvaluationCycle(title="Ciclo", start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    db_session.add(cycle)
    db_session.commit()
    headers = auth_headers(leader_user)
    client.post("/api/pdi", json={"employeeId": employee.id, "cycleId": cycle.id, "items": [_item()]}, headers=headers)

    plans = client.get(f"/api/pdi/cycle/{cycle.id}", headers=headers).json()["data"]
    assert [p["employee_id"] for p in plans] == [employee.id]
    assert plans[0]["stats"]["total"] == 1
