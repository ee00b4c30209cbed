import base64
import io

import pypdf
import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.dependencies.storage import get_blob_store
from backend.app.main import app
from backend.app.models.invoice import Invoice
from backend.app.storage.blob_store import LocalBlobStore


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def blob_dir(tmp_path):
    path = tmp_path / "blobs"
    store = LocalBlobStore(str(path))
    app.dependency_overrides[get_blob_store] = lambda: store
    yield path
    app.dependency_overrides.pop(get_blob_store, None)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_template_with_field(client: TestClient, token: str) -> dict:
    writer = pypdf.PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    resp = client.post(
        "/templates/",
        json={"name": "Standard", "file_data": base64.b64encode(buffer.getvalue()).decode("ascii")},
        headers=auth(token),
    )
    assert resp.status_code == 201
    template = resp.json()
    resp = client.post(
        f"/templates/{template['id']}/fields/",
        json={
            "name": "customer_name",
            "x_position": 10,
            "y_position": 20,
            "width": 200,
            "height": 16,
            "font_size": 12,
            "field_type": "text",
            "color_hex": "#000000",
        },
        headers=auth(token),
    )
    assert resp.status_code == 201
    return template


def create_invoice(client: TestClient, token: str, template_id: int, data: dict) -> dict:
    resp = client.post("/invoices/", json={"template_id": template_id, "invoice_data": data}, headers=auth(token))
    assert resp.status_code == 201
    return resp.json()


def stored_blob_key(invoice_id: int):
    with SessionLocal() as db:
        return db.query(Invoice).filter(Invoice.id == invoice_id).first().pdf_blob_key


def test_create_invoice_returns_record_without_pdf_key():
    client = TestClient(app)
    token = register_and_login(client, "inv1@example.com", "secret")
    template = create_template_with_field(client, token)

    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co", "total": 12.5})

    assert invoice["template_id"] == template["id"]
    assert invoice["template_name"] == "Standard"
    assert invoice["data_values"] == {"customer_name": "Acme Co", "total": 12.5}
    assert invoice["pdf_blob_key"] is None
    assert invoice["generated_at"]


def test_create_invoice_for_foreign_template_returns_404():
    client = TestClient(app)
    token_a = register_and_login(client, "inv2a@example.com", "secret")
    token_b = register_and_login(client, "inv2b@example.com", "secret")
    template = create_template_with_field(client, token_a)

    resp = client.post(
        "/invoices/",
        json={"template_id": template["id"], "invoice_data": {"customer_name": "Sneaky"}},
        headers=auth(token_b),
    )
    assert resp.status_code == 404


def test_create_invoice_requires_object_data():
    client = TestClient(app)
    token = register_and_login(client, "inv3@example.com", "secret")
    template = create_template_with_field(client, token)

    resp = client.post(
        "/invoices/",
        json={"template_id": template["id"], "invoice_data": ["not", "an", "object"]},
        headers=auth(token),
    )
    assert resp.status_code == 422


def test_get_invoice_renders_pdf_and_caches_it(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv4@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})

    resp = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert f'filename="invoice-{invoice["id"]}.pdf"' in resp.headers["content-disposition"]
    page = pypdf.PdfReader(io.BytesIO(resp.content)).pages[0]
    assert "Acme Co" in page.extract_text()
    content = page.get_contents().get_data()
    assert b"1 0 0 1 10 760 Tm" in content
    assert b"0 0 0 rg" in content

    key = stored_blob_key(invoice["id"])
    assert key.startswith(f"invoice_{invoice['id']}_")
    assert (blob_dir / key).read_bytes() == resp.content


def test_second_request_is_served_from_cache(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv5@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})

    first = client.get(f"/invoices/{invoice['id']}", headers=auth(token))
    key = stored_blob_key(invoice["id"])
    # A cache hit never needs the template source again
    (blob_dir / template["source_blob_key"]).unlink()

    second = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    assert second.status_code == 200
    assert second.content == first.content
    assert stored_blob_key(invoice["id"]) == key


def test_cache_ignores_field_edits_after_first_render():
    client = TestClient(app)
    token = register_and_login(client, "inv6@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    first = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    fields = client.get(f"/templates/{template['id']}/fields/", headers=auth(token)).json()
    client.put(
        f"/templates/{template['id']}/fields/{fields[0]['id']}",
        json={"color_hex": "#FF0000"},
        headers=auth(token),
    )
    second = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    assert second.content == first.content


def test_stale_blob_key_is_regenerated_under_new_key(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv7@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    stale_key = f"invoice_{invoice['id']}_1700000000000_deadbeef.pdf"
    with SessionLocal() as db:
        db.query(Invoice).filter(Invoice.id == invoice["id"]).update({"pdf_blob_key": stale_key})
        db.commit()

    resp = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 200
    assert "Acme Co" in pypdf.PdfReader(io.BytesIO(resp.content)).pages[0].extract_text()
    new_key = stored_blob_key(invoice["id"])
    assert new_key != stale_key
    assert (blob_dir / new_key).exists()
    assert not (blob_dir / stale_key).exists()


def test_foreign_and_missing_invoices_are_indistinguishable():
    client = TestClient(app)
    token_a = register_and_login(client, "inv8a@example.com", "secret")
    token_b = register_and_login(client, "inv8b@example.com", "secret")
    template = create_template_with_field(client, token_a)
    invoice = create_invoice(client, token_a, template["id"], {"customer_name": "Acme Co"})

    foreign = client.get(f"/invoices/{invoice['id']}", headers=auth(token_b))
    missing = client.get("/invoices/999999", headers=auth(token_b))

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"detail": "Invoice not found"}
    assert stored_blob_key(invoice["id"]) is None


def test_unparsable_template_returns_500_without_storing(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv9@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    (blob_dir / template["source_blob_key"]).write_bytes(b"corrupted template")

    resp = client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Failed to retrieve invoice"}
    assert stored_blob_key(invoice["id"]) is None
    assert [p.name for p in blob_dir.iterdir()] == [template["source_blob_key"]]


def test_list_invoices_only_returns_own_newest_first():
    client = TestClient(app)
    token_a = register_and_login(client, "inv10a@example.com", "secret")
    token_b = register_and_login(client, "inv10b@example.com", "secret")
    template_a = create_template_with_field(client, token_a)
    template_b = create_template_with_field(client, token_b)
    first = create_invoice(client, token_a, template_a["id"], {"customer_name": "First"})
    second = create_invoice(client, token_a, template_a["id"], {"customer_name": "Second"})
    create_invoice(client, token_b, template_b["id"], {"customer_name": "Other"})

    resp = client.get("/invoices/", headers=auth(token_a))

    assert resp.status_code == 200
    assert [inv["id"] for inv in resp.json()] == [second["id"], first["id"]]
    assert all(inv["template_name"] == "Standard" for inv in resp.json())


def test_delete_invoice_removes_cached_pdf(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv11@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    client.get(f"/invoices/{invoice['id']}", headers=auth(token))
    key = stored_blob_key(invoice["id"])

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 200
    assert not (blob_dir / key).exists()
    assert client.get(f"/invoices/{invoice['id']}", headers=auth(token)).status_code == 404


def test_delete_invoice_with_missing_blob_still_succeeds(blob_dir):
    client = TestClient(app)
    token = register_and_login(client, "inv12@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    with SessionLocal() as db:
        db.query(Invoice).filter(Invoice.id == invoice["id"]).update({"pdf_blob_key": "invoice_gone.pdf"})
        db.commit()

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 200


def test_delete_foreign_invoice_returns_404():
    client = TestClient(app)
    token_a = register_and_login(client, "inv13a@example.com", "secret")
    token_b = register_and_login(client, "inv13b@example.com", "secret")
    template = create_template_with_field(client, token_a)
    invoice = create_invoice(client, token_a, template["id"], {"customer_name": "Acme Co"})

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth(token_b))

    assert resp.status_code == 404
    assert client.get(f"/invoices/{invoice['id']}", headers=auth(token_a)).status_code == 200


def test_invoice_routes_require_auth():
    client = TestClient(app)
    assert client.get("/invoices/").status_code == 401
    assert client.get("/invoices/1").status_code == 401
    assert client.delete("/invoices/1").status_code == 401


class UndeletableBlobStore(LocalBlobStore):
    def delete(self, key: str) -> None:
        raise OSError(f"storage refused to delete {key}")


@pytest.fixture
def undeletable_blobs(blob_dir):
    store = UndeletableBlobStore(str(blob_dir))
    app.dependency_overrides[get_blob_store] = lambda: store
    yield blob_dir


def test_delete_invoice_succeeds_when_blob_delete_fails(undeletable_blobs):
    client = TestClient(app)
    token = register_and_login(client, "inv14@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    client.get(f"/invoices/{invoice['id']}", headers=auth(token))
    key = stored_blob_key(invoice["id"])

    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth(token))

    assert resp.status_code == 200
    assert (undeletable_blobs / key).exists()
    with SessionLocal() as db:
        assert db.query(Invoice).filter(Invoice.id == invoice["id"]).first() is None


def test_delete_template_succeeds_when_blob_delete_fails(undeletable_blobs):
    client = TestClient(app)
    token = register_and_login(client, "inv15@example.com", "secret")
    template = create_template_with_field(client, token)
    invoice = create_invoice(client, token, template["id"], {"customer_name": "Acme Co"})
    client.get(f"/invoices/{invoice['id']}", headers=auth(token))

    resp = client.delete(f"/templates/{template['id']}", headers=auth(token))

    assert resp.status_code == 200
    assert (undeletable_blobs / template["source_blob_key"]).exists()
    assert client.get(f"/templates/{template['id']}", headers=auth(token)).status_code == 404
    with SessionLocal() as db:
        assert db.query(Invoice).filter(Invoice.id == invoice["id"]).first() is None
