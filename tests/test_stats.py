def test_dashboard_stats(client, auth_headers, department):
    college_id = department["college_id"]
    client.post(
        "/api/colleges/",
        json={"name_en": "Faculty of Business", "name_ar": "كلية إدارة الأعمال", "code": "BUS"},
        headers=auth_headers
    )
    for n, person_type in enumerate(["student", "student", "staff", "visitor"], start=1):
        client.post(
            "/api/persons/",
            json={
                "type": person_type,
                "university_id": f"P-{n}",
                "full_name_en": f"Person {n}",
                "college_id": college_id if person_type == "student" else None,
            },
            headers=auth_headers
        )
    client.post(
        "/api/cards/bulk",
        json=[
            {"name": "Card One", "id_number": "C-1", "type": "student", "department": "ME"},
            {"name": "Card Two", "id_number": "C-2", "type": "staff", "department": "HR", "status": "expired"},
        ],
        headers=auth_headers
    )

    response = client.get("/api/stats/dashboard", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["total_persons"] == 4
    assert stats["total_students"] == 2
    assert stats["total_staff"] == 1
    assert stats["total_visitors"] == 1
    assert stats["total_cards"] == 2
    assert stats["active_cards"] == 1
    assert stats["expired_cards"] == 1
    assert stats["total_colleges"] == 2
    assert stats["total_departments"] == 1
    assert stats["by_college"] == [
        {"name": "Faculty of Business", "count": 0},
        {"name": "Faculty of Engineering", "count": 2},
    ]


def test_dashboard_stats_on_empty_database(client, auth_headers):
    stats = client.get("/api/stats/dashboard", headers=auth_headers).json()

    assert stats["total_persons"] == 0
    assert stats["total_cards"] == 0
    assert stats["by_college"] == []
