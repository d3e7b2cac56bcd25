"""Tests for domain exceptions (error_code, message, details) and their HTTP mapping."""

import json

from app.core.exception_handlers import _generic_exception_handler, status_for
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    ConflictException,
    CoworkingException,
    DuplicateValueException,
    InfrastructureException,
    InvalidIdentifierException,
    InvalidStateException,
    ResourceNotFoundException,
    StoreNotConfiguredException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base CoworkingException uses class name as error_code when not provided."""
    exc = CoworkingException("Algo falló")
    assert exc.message == "Algo falló"
    assert exc.error_code == "CoworkingException"
    assert exc.details == {}
    assert exc.to_dict() == {"message": "Algo falló", "details": {}}


def test_validation_exception_carries_field() -> None:
    exc = ValidationException("Formato inválido", field="email")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.to_dict()["field"] == "email"


def test_not_found_message_and_details() -> None:
    exc = ResourceNotFoundException("edificio", "abc")
    assert exc.message == "No se ha encontrado edificio con id: abc"
    assert exc.details == {"resource_type": "edificio", "resource_id": "abc"}


def test_duplicate_value_is_a_conflict() -> None:
    exc = DuplicateValueException("promoción", "codigo", "VERANO10")
    assert isinstance(exc, ConflictException)
    assert exc.error_code == "CONFLICT"
    assert exc.field == "codigo"


def test_invalid_state_lists_allowed_transitions() -> None:
    exc = InvalidStateException("reserva", "pendiente", "completada", ["cancelada", "confirmada"])
    assert exc.details["transiciones_permitidas"] == ["cancelada", "confirmada"]
    assert exc.field == "estado"


def test_authorization_message_from_resource_and_action() -> None:
    exc = AuthorizationException(resource="usuario", action="modificar")
    assert exc.message == "Permiso denegado: modificar sobre usuario"
    assert exc.details == {"resource": "usuario", "action": "modificar"}


def test_status_mapping() -> None:
    assert status_for(ValidationException("x")) == 400
    assert status_for(ConflictException("x")) == 400
    assert status_for(InvalidStateException("r", "a", "b")) == 400
    assert status_for(InvalidIdentifierException("../x")) == 400
    assert status_for(ResourceNotFoundException("r", "1")) == 404
    assert status_for(AuthenticationException()) == 401
    assert status_for(AuthorizationException()) == 403
    assert status_for(InfrastructureException("x")) == 500
    assert status_for(StoreNotConfiguredException()) == 500
    assert status_for(CoworkingException("x", error_code="UNKNOWN")) == 400


def test_500_response_has_generic_message() -> None:
    """Unhandled errors answer a fixed Spanish message with the raw error in details."""

    class FakeURL:
        path = "/api/v1/edificios"

    class FakeRequest:
        method = "GET"
        url = FakeURL()

    response = _generic_exception_handler(FakeRequest(), ValueError("conexión rechazada"))
    body = json.loads(response.body.decode())
    assert response.status_code == 500
    assert body["message"] == "Error interno del servidor"
    assert body["details"] == "conexión rechazada"
    assert "Traceback" not in body["message"]
