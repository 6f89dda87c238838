"""API tests for quotation endpoints."""

from datetime import UTC, datetime

import pytest
from httpx import AsyncClient


@pytest.fixture
async def quotation(async_client: AsyncClient, api_prefix, auth_headers, sample_line_items) -> dict:
    response = await async_client.post(
        f"{api_prefix}/quotations",
        headers=auth_headers,
        json={"clientName": "Bakkerij De Vries", "lineItems": sample_line_items, "notes": "Incl. materiaal"},
    )
    assert response.status_code == 200
    return response.json()["quotation"]


class TestCreateQuotation:
    async def test_create(self, quotation):
        assert quotation["quotationNumber"].startswith("OFF-")
        assert quotation["status"] == "draft"
        assert quotation["statusLabel"] == "Concept"
        assert quotation["subtotal"] == 250
        assert quotation["vatTotal"] == 46.5
        assert quotation["total"] == 296.5
        assert quotation["price"] == 250
        assert quotation["userId"] == "user-alice"

    async def test_server_fields_are_ignored(self, async_client: AsyncClient, api_prefix, auth_headers):
        response = await async_client.post(
            f"{api_prefix}/quotations",
            headers=auth_headers,
            json={"clientName": "X", "price": 10, "total": 99999, "userId": "user-bob", "id": "mine"},
        )

        quotation = response.json()["quotation"]
        assert quotation["userId"] == "user-alice"
        assert quotation["id"] != "mine"
        assert quotation["total"] == pytest.approx(12.1)

    async def test_snapshot_from_client(self, async_client: AsyncClient, api_prefix, auth_headers):
        client = (
            await async_client.post(
                f"{api_prefix}/clients",
                headers=auth_headers,
                json={"name": "Jansen", "address": "Dorpsstraat 1", "postalCode": "1234 AB", "city": "Ede"},
            )
        ).json()["client"]

        response = await async_client.post(
            f"{api_prefix}/quotations", headers=auth_headers, json={"clientId": client["id"], "price": 10}
        )

        quotation = response.json()["quotation"]
        assert quotation["clientName"] == "Jansen"
        assert quotation["clientAddress"] == "Dorpsstraat 1\n1234 AB Ede"

    async def test_unknown_client(self, async_client: AsyncClient, api_prefix, auth_headers, kv_store):
        response = await async_client.post(
            f"{api_prefix}/quotations", headers=auth_headers, json={"clientId": "nope"}
        )

        assert response.status_code == 404
        assert response.json()["errorCode"] == "CLIENT_NOT_FOUND"
        assert kv_store.data == {}


class TestListQuotations:
    async def _create(self, async_client, api_prefix, headers, **fields):
        response = await async_client.post(f"{api_prefix}/quotations", headers=headers, json=fields)
        return response.json()["quotation"]

    async def test_filter_search_and_sort(self, async_client: AsyncClient, api_prefix, auth_headers):
        cheap = await self._create(async_client, api_prefix, auth_headers, clientName="Bakkerij Bos", price=10)
        dear = await self._create(
            async_client, api_prefix, auth_headers, clientName="Aannemer Smit", price=500, status="sent"
        )

        response = await async_client.get(
            f"{api_prefix}/quotations", headers=auth_headers, params={"sort": "price-desc"}
        )
        assert [q["id"] for q in response.json()["quotations"]] == [dear["id"], cheap["id"]]

        response = await async_client.get(
            f"{api_prefix}/quotations", headers=auth_headers, params={"sort": "client-asc"}
        )
        assert [q["clientName"] for q in response.json()["quotations"]] == ["Aannemer Smit", "Bakkerij Bos"]

        response = await async_client.get(f"{api_prefix}/quotations", headers=auth_headers, params={"status": "sent"})
        assert [q["id"] for q in response.json()["quotations"]] == [dear["id"]]

        response = await async_client.get(f"{api_prefix}/quotations", headers=auth_headers, params={"search": "BAKKER"})
        assert [q["id"] for q in response.json()["quotations"]] == [cheap["id"]]

    async def test_unknown_sort(self, async_client: AsyncClient, api_prefix, auth_headers):
        response = await async_client.get(f"{api_prefix}/quotations", headers=auth_headers, params={"sort": "random"})

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"

    async def test_unknown_status(self, async_client: AsyncClient, api_prefix, auth_headers):
        response = await async_client.get(
            f"{api_prefix}/quotations", headers=auth_headers, params={"status": "archived"}
        )

        assert response.status_code == 422
        assert response.json()["errorCode"] == "REQUEST_VALIDATION_ERROR"

    async def test_only_own_quotations(self, async_client: AsyncClient, api_prefix, other_auth_headers, quotation):
        response = await async_client.get(f"{api_prefix}/quotations", headers=other_auth_headers)
        assert response.json()["quotations"] == []

        response = await async_client.get(f"{api_prefix}/quotations/{quotation['id']}", headers=other_auth_headers)
        assert response.status_code == 404


class TestUpdateQuotation:
    async def test_update_lines_recomputes_totals(self, async_client: AsyncClient, api_prefix, auth_headers, quotation):
        response = await async_client.put(
            f"{api_prefix}/quotations/{quotation['id']}",
            headers=auth_headers,
            json={"lineItems": [{"description": "Muur", "unitPrice": "100", "quantity": 1, "vatPercentage": 21}]},
        )

        updated = response.json()["quotation"]
        assert updated["total"] == 121
        assert updated["description"] == "Muur"
        assert updated["quotationNumber"] == quotation["quotationNumber"]
        assert updated["notes"] == "Incl. materiaal"

    async def test_accepted_can_be_changed_back(self, async_client: AsyncClient, api_prefix, auth_headers, quotation):
        url = f"{api_prefix}/quotations/{quotation['id']}"
        response = await async_client.put(url, headers=auth_headers, json={"status": "accepted"})
        assert response.json()["quotation"]["statusLabel"] == "Geaccepteerd"

        response = await async_client.put(url, headers=auth_headers, json={"status": "sent"})

        assert response.status_code == 200
        assert response.json()["quotation"]["status"] == "sent"
        assert response.json()["quotation"]["statusLabel"] == "Verstuurd"

    async def test_empty_strings_are_absent(self, async_client: AsyncClient, api_prefix, auth_headers):
        response = await async_client.post(
            f"{api_prefix}/quotations",
            headers=auth_headers,
            json={"clientName": "Jansen", "price": 10, "date": "", "expiryDate": "", "status": ""},
        )

        assert response.status_code == 200
        quotation = response.json()["quotation"]
        assert quotation["status"] == "draft"
        assert quotation["expiryDate"] is None
        assert quotation["date"]

        response = await async_client.put(
            f"{api_prefix}/quotations/{quotation['id']}", headers=auth_headers, json={"status": "", "date": ""}
        )

        assert response.status_code == 200
        assert response.json()["quotation"]["status"] == "draft"
        assert response.json()["quotation"]["date"] == quotation["date"]

    async def test_missing(self, async_client: AsyncClient, api_prefix, auth_headers):
        response = await async_client.put(f"{api_prefix}/quotations/nope", headers=auth_headers, json={"notes": "x"})
        assert response.status_code == 404
        assert response.json()["errorCode"] == "QUOTATION_NOT_FOUND"


class TestConvertQuotation:
    async def test_convert(self, async_client: AsyncClient, api_prefix, auth_headers, quotation):
        response = await async_client.post(
            f"{api_prefix}/quotations/{quotation['id']}/convert-to-invoice", headers=auth_headers
        )

        assert response.status_code == 200
        invoice = response.json()["invoice"]
        year = datetime.now(UTC).year
        assert invoice["invoiceNumber"] == f"FAC-{year}-0001"
        assert invoice["status"] == "sent"
        assert invoice["displayStatus"] == "sent"
        assert invoice["quotationId"] == quotation["id"]
        assert invoice["quotationNumber"] == quotation["quotationNumber"]
        assert invoice["clientName"] == "Bakkerij De Vries"
        assert invoice["total"] == 296.5
        assert len(invoice["lineItems"]) == 2

        response = await async_client.get(f"{api_prefix}/quotations/{quotation['id']}", headers=auth_headers)
        converted = response.json()["quotation"]
        assert converted["status"] == "accepted"
        assert converted["invoiceId"] == invoice["id"]

    async def test_convert_twice_numbers_sequentially(
        self, async_client: AsyncClient, api_prefix, auth_headers, quotation
    ):
        url = f"{api_prefix}/quotations/{quotation['id']}/convert-to-invoice"
        first = (await async_client.post(url, headers=auth_headers)).json()["invoice"]
        second = (await async_client.post(url, headers=auth_headers)).json()["invoice"]

        assert first["invoiceNumber"][-4:] == "0001"
        assert second["invoiceNumber"][-4:] == "0002"

        response = await async_client.get(f"{api_prefix}/quotations/{quotation['id']}", headers=auth_headers)
        assert response.json()["quotation"]["invoiceId"] == first["id"]

    async def test_convert_missing(self, async_client: AsyncClient, api_prefix, auth_headers, kv_store):
        response = await async_client.post(
            f"{api_prefix}/quotations/nope/convert-to-invoice", headers=auth_headers
        )

        assert response.status_code == 404
        assert kv_store.writes == 0


class TestQuotationPdfAndDelete:
    async def test_pdf(self, async_client: AsyncClient, api_prefix, auth_headers, quotation, pdf_renderer):
        response = await async_client.get(f"{api_prefix}/quotations/{quotation['id']}/pdf", headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == (
            f'attachment; filename="Offerte-{quotation["quotationNumber"]}.pdf"'
        )
        assert response.content.startswith(b"%PDF")
        pdf_renderer.render_quotation.assert_called_once()

    async def test_pdf_missing(self, async_client: AsyncClient, api_prefix, auth_headers, pdf_renderer):
        response = await async_client.get(f"{api_prefix}/quotations/nope/pdf", headers=auth_headers)

        assert response.status_code == 404
        pdf_renderer.render_quotation.assert_not_called()

    async def test_delete(self, async_client: AsyncClient, api_prefix, auth_headers, quotation):
        url = f"{api_prefix}/quotations/{quotation['id']}"

        response = await async_client.delete(url, headers=auth_headers)
        assert response.json() == {"success": True}

        assert (await async_client.get(url, headers=auth_headers)).status_code == 404
        assert (await async_client.delete(url, headers=auth_headers)).status_code == 404
