import pytest
from datetime import datetime
from hrtalent.models.progression import ProgressionRule


@pytest.fixture
def placed_user(make_user, department, salary_structure):
    return make_user(
        "placed@talent.test", department,
        current_track_position_id=salary_structure.junior.id,
        current_salary_level_id=salary_structure.level_b.id,
        current_salary=10500.0,
        position_start_date=datetime(2022, 1, 10),
    )


def test_calculate_salary(client, employee, auth_headers, salary_structure):
    response = client.post(
        "/api/salary/calculate",
        json={"trackPositionId": salary_structure.junior.id, "salaryLevelId": salary_structure.level_c.id},
        headers=auth_headers(employee),
    )
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {"baseSalary": 10000.0, "levelPercentage": 10.0, "calculatedSalary": 11000.0},
    }


def test_calculate_salary_unknown_position(client, employee, auth_headers, salary_structure):
    response = client.post(
        "/api/salary/calculate",
        json={"trackPositionId": 424242, "salaryLevelId": salary_structure.level_a.id},
        headers=auth_headers(employee),
    )
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "NOT_FOUND"


def test_salary_routes_require_a_token(client):
    response = client.post("/api/salary/calculate", json={"trackPositionId": 1, "salaryLevelId": 1})
    assert response.status_code == 401
    assert response.json()["success"] is False


def test_level_table(client, employee, auth_headers, salary_structure):
    response = client.get(
        f"/api/salary/track-positions/{salary_structure.pleno.id}/levels",
        headers=auth_headers(employee),
    )
    rows = response.json()["data"]
    assert [r["levelName"] for r in rows] == ["A", "B", "C", "D"]
    assert [r["calculatedSalary"] for r in rows] == [15000.0, 15750.0, 16500.0, 17250.0]


def test_list_tracks(client, employee, auth_headers, salary_structure):
    response = client.get("/api/salary/tracks", headers=auth_headers(employee))
    tracks = response.json()["data"]
    assert len(tracks) == 1
    assert tracks[0]["name"] == "Engenharia de Software"
    assert len(tracks[0]["positions"]) == 3


def test_create_track_rejects_duplicate_name(client, director_user, auth_headers, salary_structure, department):
    response = client.post(
        "/api/salary/tracks",
        json={"name": "Engenharia de Software", "departmentId": department.id},
        headers=auth_headers(director_user),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["errors"] == ["Já existe uma trilha com este nome no departamento"]
    assert body["warnings"] == ["Trilha criada sem posições - adicione cargos"]


def test_create_track(client, director_user, auth_headers, salary_structure, department):
    c1, c2 = salary_structure.classes
    response = client.post(
        "/api/salary/tracks",
        json={
            "name": "Dados",
            "departmentId": department.id,
            "positions": [
                {"positionId": salary_structure.junior.position_id, "classId": c1.id, "baseSalary": 9000, "orderIndex": 1},
                {"positionId": salary_structure.pleno.position_id, "classId": c2.id, "baseSalary": 13000, "orderIndex": 2},
            ],
        },
        headers=auth_headers(director_user),
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "Dados"
    assert [p["base_salary"] for p in data["positions"]] == [9000.0, 13000.0]


def test_create_track_forbidden_for_employees(client, employee, auth_headers):
    response = client.post("/api/salary/tracks", json={"name": "Dados"}, headers=auth_headers(employee))
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_validate_structure(client, leader_user, auth_headers, salary_structure):
    c1, c2 = salary_structure.classes
    response = client.post(
        "/api/salary/structure/validate",
        json={"positions": [
            {"classId": c1.id, "baseSalary": 12000},
            {"classId": c2.id, "baseSalary": 11000},
        ]},
        headers=auth_headers(leader_user),
    )
    assert response.status_code == 200
    result = response.json()["data"]
    assert result["is_valid"] is False
    assert result["errors"] == ["Salários devem ser progressivos entre classes"]


def test_assign_track(client, director_user, auth_headers, make_user, department, salary_structure):
    user = make_user("assign@talent.test", department)
    response = client.put(
        f"/api/salary/users/{user.id}/assign-track",
        json={"trackPositionId": salary_structure.junior.id, "salaryLevelId": salary_structure.level_b.id},
        headers=auth_headers(director_user),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["current_track_position_id"] == salary_structure.junior.id
    assert data["current_salary"] == 10500.0
    assert data["position"] == "Desenvolvedor Júnior"
    assert data["warnings"] == []


def test_assign_track_blocked_returns_errors_and_warnings(
    client, director_user, auth_headers, make_user, other_department, salary_structure
):
    user = make_user("former@talent.test", other_department, is_active=False)
    response = client.put(
        f"/api/salary/users/{user.id}/assign-track",
        json={"trackPositionId": salary_structure.junior.id, "salaryLevelId": salary_structure.level_a.id},
        headers=auth_headers(director_user),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "VALIDATION_FAILED"
    assert body["error"] == "Validação falhou: Usuário inativo não pode ser atribuído a cargos"
    assert body["errors"] == ["Usuário inativo não pode ser atribuído a cargos"]
    assert body["warnings"] == ["Usuário sendo atribuído a trilha de outro departamento"]


def test_update_level(client, leader_user, auth_headers, placed_user, salary_structure):
    response = client.put(
        f"/api/salary/users/{placed_user.id}/update-level",
        json={"salaryLevelId": salary_structure.level_c.id},
        headers=auth_headers(leader_user),
    )
    assert response.status_code == 200
    assert response.json()["data"]["current_salary"] == 11000.0


def test_update_level_must_be_sequential(client, leader_user, auth_headers, placed_user, salary_structure):
    response = client.put(
        f"/api/salary/users/{placed_user.id}/update-level",
        json={"salaryLevelId": salary_structure.level_d.id},
        headers=auth_headers(leader_user),
    )
    assert response.status_code == 400
    assert response.json()["errors"] == ["Progressão de nível deve ser sequencial"]


def test_progress_and_read_history(client, db_session, director_user, auth_headers, placed_user, salary_structure):
    db_session.add(ProgressionRule(
        from_position_id=salary_structure.junior.id,
        to_position_id=salary_structure.pleno.id,
        progression_type="vertical",
        min_time_months=12,
    ))
    db_session.commit()
    headers = auth_headers(director_user)

    response = client.post(
        f"/api/salary/users/{placed_user.id}/progress",
        json={
            "toTrackPositionId": salary_structure.pleno.id,
            "toSalaryLevelId": salary_structure.level_a.id,
            "progressionType": "vertical",
            "reason": "Promoção anual",
        },
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["history"]["to_salary"] == 15000.0
    assert data["history"]["from_salary"] == 10500.0
    assert data["history"]["approved_by"] == director_user.id
    assert data["user"]["current_track_position_id"] == salary_structure.pleno.id
    assert data["warnings"] == []

    history = client.get(f"/api/salary/users/{placed_user.id}/progression-history", headers=headers).json()["data"]
    assert [h["id"] for h in history] == [data["history"]["id"]]
    assert history[0]["reason"] == "Promoção anual"


def test_progress_without_rule_is_rejected(client, director_user, auth_headers, placed_user, salary_structure):
    response = client.post(
        f"/api/salary/users/{placed_user.id}/progress",
        json={
            "toTrackPositionId": salary_structure.pleno.id,
            "toSalaryLevelId": salary_structure.level_a.id,
            "progressionType": "vertical",
        },
        headers=auth_headers(director_user),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validação falhou: Regra de progressão não encontrada"
    assert body["errors"] == ["Regra de progressão não encontrada"]


def test_progress_unknown_type_is_a_request_error(client, director_user, auth_headers, placed_user, salary_structure):
    response = client.post(
        f"/api/salary/users/{placed_user.id}/progress",
        json={
            "toTrackPositionId": salary_structure.pleno.id,
            "toSalaryLevelId": salary_structure.level_a.id,
            "progressionType": "diagonal",
        },
        headers=auth_headers(director_user),
    )
    assert response.status_code == 422
    assert response.json()["code"] == "REQUEST_VALIDATION"


def test_possible_progressions(client, db_session, employee, auth_headers, placed_user, salary_structure):
    db_session.add(ProgressionRule(
        from_position_id=salary_structure.junior.id,
        to_position_id=salary_structure.junior2.id,
        progression_type="horizontal",
    ))
    db_session.commit()
    response = client.get(
        f"/api/salary/users/{placed_user.id}/possible-progressions", headers=auth_headers(employee)
    )
    rules = response.json()["data"]
    assert [(r["to_position_id"], r["progression_type"]) for r in rules] == [
        (salary_structure.junior2.id, "horizontal")
    ]


def test_reports(client, director_user, auth_headers, placed_user, make_user):
    make_user("contractor@talent.test", None, current_salary=8000.0)
    headers = auth_headers(director_user)

    overview = client.get("/api/salary/reports/overview", headers=headers).json()["data"]
    assert overview["totalEmployees"] == 3
    assert overview["employeesWithTrack"] == 1
    assert overview["employeesWithoutTrack"] == 2
    assert overview["totalPayroll"] == 18500.0
    assert overview["maxSalary"] == 10500.0
    assert overview["activeTracks"] == 1

    departments = client.get("/api/salary/reports/by-department", headers=headers).json()["data"]
    by_name = {d["department"]: d for d in departments}
    assert by_name["Engenharia"]["count"] == 2
    assert by_name["Engenharia"]["totalSalary"] == 10500.0
    assert by_name["Sem Departamento"]["totalSalary"] == 8000.0

    positions = client.get("/api/salary/reports/by-position", headers=headers).json()["data"]
    by_position = {(p["position"], p["class"]): p for p in positions}
    assert by_position[("Desenvolvedor Júnior", "C1")]["avgSalary"] == 10500.0
    assert by_position[("Sem Cargo", None)]["count"] == 2


def test_reports_are_for_managers(client, employee, auth_headers):
    response = client.get("/api/salary/reports/overview", headers=auth_headers(employee))
    assert response.status_code == 403


def test_budget_simulation(client, director_user, auth_headers, placed_user, make_user, department):
    make_user("analyst@talent.test", department, current_salary=8000.0)
    response = client.post(
        "/api/salary/reports/budget-simulation",
        json={"scenarios": [
            {"type": "individual", "targetId": placed_user.id, "absoluteIncrease": 500},
            {"type": "department", "targetId": department.id, "percentageIncrease": 10},
            {"type": "global"},
        ]},
        headers=auth_headers(director_user),
    )
    assert response.status_code == 200
    data = response.json()["data"]
    individual, by_department, untouched = data["scenarios"]

    assert individual["affectedCount"] == 1
    assert individual["increase"] == 500.0
    assert individual["totalCostWithCharges"] == 725.0

    assert by_department["affectedCount"] == 3
    assert by_department["currentCost"] == 18500.0
    assert by_department["increase"] == pytest.approx(1850.0)

    assert untouched["newCost"] == untouched["currentCost"]
    assert untouched["increase"] == 0.0

    assert data["totalImpact"] == pytest.approx(2350.0)
    assert data["totalWithCharges"] == pytest.approx(3407.5)


def test_budget_simulation_rejects_unknown_scenario_type(client, director_user, auth_headers):
    response = client.post(
        "/api/salary/reports/budget-simulation",
        json={"scenarios": [{"type": "company"}]},
        headers=auth_headers(director_user),
    )
    assert response.status_code == 422
