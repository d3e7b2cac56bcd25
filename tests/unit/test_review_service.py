"""Tests for ReviewService: moderation and the aggregate-rating hook."""

from unittest.mock import AsyncMock

import pytest

from app.application.services import ReviewService
from app.application.services.review_service import RATING_WARNING
from app.domain.exceptions import InvalidStateException, ResourceNotFoundException, ValidationException
from app.infrastructure.persistence.container import Repositories


async def make_building(repos: Repositories) -> dict:
    return await repos.buildings.create(
        {
            "nombre": "Edificio Reseñas",
            "usuarioId": "owner1",
            "direccion": {"ciudad": "Cali", "pais": "Colombia"},
        }
    )


def review(entity_id: str, rating: int, **extra) -> dict:
    return {
        "usuarioId": "user1",
        "entidad": {"tipo": "edificio", "id": entity_id},
        "calificacion": rating,
        "comentario": "Muy buen lugar para trabajar",
        **extra,
    }


@pytest.fixture
def service(repos: Repositories) -> ReviewService:
    return ReviewService(repos.reviews, repos.rated)


async def test_new_review_is_pending_and_does_not_count(
    repos: Repositories, service: ReviewService
) -> None:
    building = await make_building(repos)
    created, warning = await service.create(review(building["id"], 5))
    assert created["estado"] == "pendiente"
    assert warning is None
    stored = await repos.buildings.get_by_id(building["id"])
    assert stored["calificacionPromedio"] == 0
    assert stored["totalResenas"] == 0


async def test_rating_follows_approved_reviews(repos: Repositories, service: ReviewService) -> None:
    """Approved 4 and 2 average 3.0; deleting the 2 leaves 4.0."""
    building = await make_building(repos)
    four, _ = await service.create(review(building["id"], 4))
    two, _ = await service.create(review(building["id"], 2))
    await service.moderate(four["id"], "aprobada")
    await service.moderate(two["id"], "aprobada")

    stored = await repos.buildings.get_by_id(building["id"])
    assert stored["calificacionPromedio"] == 3.0
    assert stored["totalResenas"] == 2

    assert await service.delete(two["id"]) is None
    stored = await repos.buildings.get_by_id(building["id"])
    assert stored["calificacionPromedio"] == 4.0
    assert stored["totalResenas"] == 1


async def test_rejected_review_is_excluded(repos: Repositories, service: ReviewService) -> None:
    building = await make_building(repos)
    created, _ = await service.create(review(building["id"], 1))
    after, _ = await service.moderate(created["id"], "rechazada", "Lenguaje ofensivo")
    assert after["estado"] == "rechazada"
    assert after["motivoRechazo"] == "Lenguaje ofensivo"
    summary = await repos.reviews.rating_summary("edificio", building["id"])
    assert summary["total"] == 0
    assert summary["promedio"] == 0.0


async def test_moderating_twice_is_invalid(repos: Repositories, service: ReviewService) -> None:
    building = await make_building(repos)
    created, _ = await service.create(review(building["id"], 3))
    await service.moderate(created["id"], "aprobada")
    with pytest.raises(InvalidStateException):
        await service.moderate(created["id"], "rechazada")


async def test_update_rating_recomputes(repos: Repositories, service: ReviewService) -> None:
    building = await make_building(repos)
    created, _ = await service.create(review(building["id"], 2))
    await service.moderate(created["id"], "aprobada")
    after, warning = await service.update(created["id"], {"calificacion": 5})
    assert after["calificacion"] == 5
    assert warning is None
    assert (await repos.buildings.get_by_id(building["id"]))["calificacionPromedio"] == 5.0


async def test_update_rejects_status_change(service: ReviewService) -> None:
    with pytest.raises(ValidationException):
        await service.update("any", {"estado": "aprobada"})


async def test_missing_review_raises_not_found(service: ReviewService) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.delete("missing")
    with pytest.raises(ResourceNotFoundException):
        await service.moderate("missing", "aprobada")


async def test_aspect_averages(repos: Repositories, service: ReviewService) -> None:
    building = await make_building(repos)
    a, _ = await service.create(review(building["id"], 4, aspectos={"limpieza": 5, "ubicacion": 3}))
    b, _ = await service.create(review(building["id"], 4, aspectos={"limpieza": 3}))
    await service.moderate(a["id"], "aprobada")
    await service.moderate(b["id"], "aprobada")
    summary = await repos.reviews.rating_summary("edificio", building["id"])
    assert summary["aspectos"]["limpieza"] == 4.0
    assert summary["aspectos"]["ubicacion"] == 3.0
    assert summary["aspectos"]["servicios"] == 0.0


async def test_failed_rating_push_returns_warning_and_keeps_review() -> None:
    """The review write stands even when the rated entity cannot be updated."""
    reviews = AsyncMock()
    reviews.create.return_value = {"id": "r1", "entidad": {"tipo": "edificio", "id": "b1"}}
    reviews.compute_rating.return_value = {"promedio": 4.0, "total": 1}
    rated = AsyncMock()
    rated.update_aggregate_rating.side_effect = RuntimeError("store down")
    service = ReviewService(reviews, {"edificio": rated})

    created, warning = await service.create({"calificacion": 4})
    assert created["id"] == "r1"
    assert warning == RATING_WARNING


async def test_missing_rated_entity_returns_warning() -> None:
    reviews = AsyncMock()
    reviews.compute_rating.return_value = {"promedio": 0.0, "total": 0}
    rated = AsyncMock()
    rated.update_aggregate_rating.return_value = None
    service = ReviewService(reviews, {"oficina": rated})
    assert await service.refresh_rating({"tipo": "oficina", "id": "o1"}) == RATING_WARNING
    assert await service.refresh_rating({"tipo": "desconocido", "id": "x"}) == RATING_WARNING
    assert await service.refresh_rating(None) is None
