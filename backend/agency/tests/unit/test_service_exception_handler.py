# agency/tests/unit/test_service_exception_handler.py

from unittest.mock import Mock, patch

import pytest
from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from agency.mixins.service_exception_handler import ServiceExceptionHandlerMixin
from agency.utils.currency_utils import CurrencyConversionError


class MockService:
    """A mock service to simulate different exception scenarios."""

    @staticmethod
    def method_success():
        return "success"

    @staticmethod
    def method_drf_validation_error():
        raise DRFValidationError("DRF validation error")

    @staticmethod
    def method_django_validation_error():
        raise DjangoValidationError("Django validation error")

    @staticmethod
    def method_django_field_error():
        raise DjangoValidationError({"amount": ["Amount must not be negative."]})

    @staticmethod
    def method_python_permission_error():
        raise PermissionError("Python permission error")

    @staticmethod
    def method_not_found():
        raise ObjectDoesNotExist("Account not found")

    @staticmethod
    def method_currency_error():
        raise CurrencyConversionError("No rate for CHF", currency="CHF")

    @staticmethod
    def method_api_exception():
        raise APIException("API exception")

    @staticmethod
    def method_generic_exception():
        raise Exception("Generic service error")


class TestServiceExceptionHandlerMixin:
    """Tests for ServiceExceptionHandlerMixin."""

    def setup_method(self, method):
        self.mixin_instance = ServiceExceptionHandlerMixin()
        self.mixin_instance.request = Mock()
        self.mixin_instance.request.user = Mock(id=1)

    @patch("agency.mixins.service_exception_handler.logger")
    def test_success_passes_result_and_args(self, mock_logger):
        class LedgerService:
            @staticmethod
            def add_transaction(account, amount=None):
                return (account, amount)

        result = self.mixin_instance.handle_service_call(
            LedgerService.add_transaction, 1, amount=2
        )

        assert result == (1, 2)
        start_extra = mock_logger.debug.call_args_list[0].kwargs["extra"]
        assert start_extra["service_name"] == "LedgerService"

    def test_static_method_success(self):
        assert self.mixin_instance.handle_service_call(MockService.method_success) == "success"

    def test_drf_validation_error_passes_through(self):
        with pytest.raises(DRFValidationError):
            self.mixin_instance.handle_service_call(MockService.method_drf_validation_error)

    def test_django_validation_error_translated(self):
        with pytest.raises(DRFValidationError) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_django_validation_error)

        assert exc_info.value.detail == ["Django validation error"]

    def test_django_field_errors_keep_field_names(self):
        with pytest.raises(DRFValidationError) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_django_field_error)

        assert exc_info.value.detail == {"amount": ["Amount must not be negative."]}

    def test_permission_error_translated(self):
        with pytest.raises(DRFPermissionDenied) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_python_permission_error)

        assert str(exc_info.value.detail) == "Python permission error"

    def test_object_does_not_exist_becomes_404(self):
        with pytest.raises(NotFound):
            self.mixin_instance.handle_service_call(MockService.method_not_found)

    def test_currency_error_becomes_validation_error(self):
        with pytest.raises(DRFValidationError) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_currency_error)

        assert exc_info.value.detail == {"currency": ["No rate for CHF"]}

    def test_api_exception_passes_through(self):
        with pytest.raises(APIException) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_api_exception)

        assert str(exc_info.value.detail) == "API exception"

    @patch("agency.mixins.service_exception_handler.logger")
    def test_unexpected_error_hidden_and_logged(self, mock_logger):
        with pytest.raises(APIException) as exc_info:
            self.mixin_instance.handle_service_call(MockService.method_generic_exception)

        assert str(exc_info.value.detail) == "Service operation failed"
        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args.kwargs["exc_info"] is True
