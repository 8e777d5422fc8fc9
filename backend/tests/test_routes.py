"""
MovieLibrary Backend: API Endpoint Tests
=========================================

What:  The HTTP surface, through the FastAPI app and its real unit of work.
How:   HTTPX AsyncClient over ASGITransport; the database is the in-memory
       SQLite engine from conftest.

What we test:
    ✅ status codes for success, validation, not found and conflict
    ✅ row_version travels as base64 and must be sent back to update/return
    ✅ error bodies carry error / message / details / request_id
    ✅ correlation IDs are honoured and echoed
"""

from datetime import timedelta

import pytest


def _movie_body(**overrides):
    body = {
        "title": "Spirited Away",
        "director": "Hayao Miyazaki",
        "release_year": 2001,
        "genre": "Animation",
        "rating": "8.6",
        "description": "A girl wanders into a world of spirits.",
    }
    body.update(overrides)
    return body


async def _add_movie(client, **overrides):
    response = await client.post("/api/movies", json=_movie_body(**overrides))
    assert response.status_code == 201
    return response.json()


class TestMovieEndpoints:

    @pytest.mark.asyncio
    async def test_add_then_get(self, test_client):
        created = await _add_movie(test_client)

        response = await test_client.get(f"/api/movies/{created['id']}")

        assert response.status_code == 200
        movie = response.json()
        assert movie["title"] == "Spirited Away"
        assert movie["row_version"] == created["row_version"]
        assert movie["updated_at"] is None

    @pytest.mark.asyncio
    async def test_add_invalid_movie(self, test_client):
        response = await test_client.post("/api/movies", json=_movie_body(title="", rating="12"))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        fields = {e["field"] for e in body["details"]["errors"]}
        assert fields == {"title", "rating"}
        assert body["request_id"]

    @pytest.mark.asyncio
    async def test_get_missing_movie(self, test_client):
        response = await test_client.get("/api/movies/00000000-0000-0000-0000-000000000001")

        assert response.status_code == 404
        assert response.json()["message"] == (
            "Movie with Id 00000000-0000-0000-0000-000000000001 not found"
        )

    @pytest.mark.asyncio
    async def test_update_then_stale_update_conflicts(self, test_client):
        created = await _add_movie(test_client)
        movie_id = created["id"]
        original_token = created["row_version"]

        first = await test_client.put(
            f"/api/movies/{movie_id}",
            json=_movie_body(rating="9.0", row_version=original_token),
        )
        assert first.status_code == 200
        updated = first.json()
        assert updated["success"] is True
        assert updated["movie"]["row_version"] != original_token

        second = await test_client.put(
            f"/api/movies/{movie_id}",
            json=_movie_body(rating="1.0", row_version=original_token),
        )

        assert second.status_code == 409
        assert second.json()["error"] == "concurrency_conflict"
        current = (await test_client.get(f"/api/movies/{movie_id}")).json()
        assert current["rating"] == "9.0"
        assert current["row_version"] == updated["movie"]["row_version"]

    @pytest.mark.asyncio
    async def test_update_with_malformed_token(self, test_client):
        created = await _add_movie(test_client)

        response = await test_client.put(
            f"/api/movies/{created['id']}", json=_movie_body(row_version="not base64!")
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_then_delete_again(self, test_client):
        created = await _add_movie(test_client)

        first = await test_client.delete(f"/api/movies/{created['id']}")
        second = await test_client.delete(f"/api/movies/{created['id']}")

        assert first.status_code == 200
        assert first.json() == {"success": True, "message": "Movie deleted successfully"}
        assert second.status_code == 404
        assert second.json()["success"] is False

    @pytest.mark.asyncio
    async def test_list_and_search(self, test_client):
        await _add_movie(test_client)
        await _add_movie(test_client, title="Princess Mononoke", release_year=1997, rating="8.3")
        await _add_movie(test_client, title="Paprika", director="Satoshi Kon", release_year=2006)

        listing = (await test_client.get("/api/movies")).json()
        search = (
            await test_client.get(
                "/api/movies/search", params={"director": "miyazaki", "min_year": 2000}
            )
        ).json()

        assert listing["total_count"] == 3
        assert listing["movies"][0]["title"] == "Paprika"
        assert [m["title"] for m in search["movies"]] == ["Spirited Away"]


class TestRentalEndpoints:

    async def _rent(self, client, movie_id, rental_date):
        response = await client.post(
            "/api/rentals",
            json={
                "customer_name": "Chihiro Ogino",
                "movie_id": movie_id,
                "rental_date": rental_date.isoformat(),
                "daily_rate": "3.99",
            },
        )
        return response

    @pytest.mark.asyncio
    async def test_rent_and_return(self, test_client, rental_start):
        movie = await _add_movie(test_client)
        rented = await self._rent(test_client, movie["id"], rental_start)
        assert rented.status_code == 201
        rental = rented.json()
        assert rental["item_name"] == "Spirited Away"
        assert rental["status"] == "Active"

        returned = await test_client.put(
            f"/api/rentals/{rental['id']}/return",
            json={
                "return_date": (rental_start + timedelta(days=5)).isoformat(),
                "row_version": rental["row_version"],
            },
        )

        assert returned.status_code == 200
        body = returned.json()
        assert body["status"] == "Returned"
        assert body["days_charged"] == 5
        assert body["total_cost"] == "19.95"

        stored = (await test_client.get(f"/api/rentals/{rental['id']}")).json()
        assert stored["status"] == "Returned"
        assert stored["return_date"] is not None
        assert stored["row_version"] == body["row_version"]

    @pytest.mark.asyncio
    async def test_second_return_is_rejected(self, test_client, rental_start):
        movie = await _add_movie(test_client)
        rental = (await self._rent(test_client, movie["id"], rental_start)).json()
        first = await test_client.put(
            f"/api/rentals/{rental['id']}/return",
            json={"return_date": (rental_start + timedelta(hours=2)).isoformat(),
                  "row_version": rental["row_version"]},
        )
        assert first.json()["total_cost"] == "3.99"

        second = await test_client.put(
            f"/api/rentals/{rental['id']}/return",
            json={"return_date": (rental_start + timedelta(days=1)).isoformat(),
                  "row_version": first.json()["row_version"]},
        )

        assert second.status_code == 400
        assert second.json()["error"] == "invalid_state_transition"

    @pytest.mark.asyncio
    async def test_return_before_rental_date(self, test_client, rental_start):
        movie = await _add_movie(test_client)
        rental = (await self._rent(test_client, movie["id"], rental_start)).json()

        response = await test_client.put(
            f"/api/rentals/{rental['id']}/return",
            json={"return_date": (rental_start - timedelta(days=1)).isoformat(),
                  "row_version": rental["row_version"]},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Return date cannot be before rental date"
        stored = (await test_client.get(f"/api/rentals/{rental['id']}")).json()
        assert stored["status"] == "Active"

    @pytest.mark.asyncio
    async def test_rent_missing_movie(self, test_client, rental_start):
        response = await self._rent(
            test_client, "00000000-0000-0000-0000-000000000002", rental_start
        )

        assert response.status_code == 404
        listing = (await test_client.get("/api/rentals")).json()
        assert listing["total_count"] == 0

    @pytest.mark.asyncio
    async def test_list_filters_by_status(self, test_client, rental_start):
        movie = await _add_movie(test_client)
        rental = (await self._rent(test_client, movie["id"], rental_start)).json()
        await self._rent(test_client, movie["id"], rental_start)
        await test_client.put(
            f"/api/rentals/{rental['id']}/return",
            json={"return_date": (rental_start + timedelta(days=1)).isoformat(),
                  "row_version": rental["row_version"]},
        )

        active = (await test_client.get("/api/rentals", params={"status": "Active"})).json()
        returned = (await test_client.get("/api/rentals", params={"status": "Returned"})).json()

        assert active["total_count"] == 1
        assert [r["id"] for r in returned["rentals"]] == [rental["id"]]


class TestCrossCutting:

    @pytest.mark.asyncio
    async def test_correlation_id_is_echoed(self, test_client):
        response = await test_client.get(
            "/api/movies", headers={"X-Correlation-ID": "corr-123"}
        )

        assert response.headers["X-Correlation-ID"] == "corr-123"
        assert response.headers["X-Request-ID"] == "corr-123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(
            "/api/rentals/00000000-0000-0000-0000-000000000003",
            headers={"X-Request-ID": "req-42"},
        )

        assert response.status_code == 404
        assert response.json()["request_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_request_id_generated_when_absent(self, test_client):
        response = await test_client.get("/api/movies")

        assert response.headers["X-Correlation-ID"]

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
