from __future__ import annotations


def test_loader_script(client) -> None:
    response = client.get("/embed.js")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert "max-age=300" in response.headers["cache-control"]
    assert "SCHOOLBOT_RESIZE" in response.text


def test_chatbot_page(client) -> None:
    response = client.get("/embed/chatbot", params={"school": " links ", "theme": "neon"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert '"links"' in response.text
    assert "/api/faq" in response.text


def test_diagnosis_page(client) -> None:
    response = client.get("/embed/diagnosis", params={"school": "links"})

    assert response.status_code == 200
    assert "/api/diagnosis/result" in response.text
