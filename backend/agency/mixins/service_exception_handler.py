"""
Service exception handler mixin.

Translates exceptions raised by the agency service layer into DRF exceptions
so views return proper HTTP status codes, and logs every failure with
structured context.
"""

import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import PermissionDenied as DRFPermissionDenied
from rest_framework.exceptions import ValidationError as DRFValidationError

from ..utils.currency_utils import CurrencyConversionError

logger = logging.getLogger(__name__)


class ServiceExceptionHandlerMixin:
    """
    Mixin for calling service methods from views.

    - Django ``ValidationError`` becomes a DRF 400
    - ``PermissionError`` becomes a DRF 403
    - ``ObjectDoesNotExist`` becomes a DRF 404
    - ``CurrencyConversionError`` becomes a DRF 400 naming the currency
    - DRF exceptions pass through unchanged
    - anything else becomes a generic 500 without leaking details

    Usage:
        result = self.handle_service_call(
            LedgerService.add_transaction, account, request.data
        )
    """

    def _service_context(self, service_call):
        # Static service methods carry their class in the qualified name
        qualname = getattr(service_call, "__qualname__", "")
        request = getattr(self, "request", None)
        return {
            "service_name": qualname.split(".")[-2] if "." in qualname else type(self).__name__,
            "method_name": getattr(service_call, "__name__", str(service_call)),
            "user_id": getattr(getattr(request, "user", None), "id", None) if request else None,
        }

    def handle_service_call(self, service_call, *args, **kwargs):
        """
        Execute a service call with exception translation and logging.

        Args:
            service_call: Service method to execute
            *args: Positional arguments for service call
            **kwargs: Keyword arguments for service call

        Returns:
            Any: Result from service call

        Raises:
            DRFValidationError: For business rule violations
            DRFPermissionDenied: For authorization failures
            NotFound: For missing objects
            APIException: For unexpected service errors
        """
        context = self._service_context(service_call)

        logger.debug(
            "Service call execution initiated",
            extra={
                **context,
                "args_count": len(args),
                "kwargs_keys": list(kwargs.keys()),
                "action": "service_call_start",
                "component": "ServiceExceptionHandlerMixin",
            },
        )

        try:
            result = service_call(*args, **kwargs)

        except (DRFValidationError, DRFPermissionDenied, NotFound) as e:
            logger.warning(
                "Service raised DRF exception",
                extra={
                    **context,
                    "error_type": type(e).__name__,
                    "error_detail": e.detail,
                    "action": "service_drf_exception",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )
            raise

        except DjangoValidationError as e:
            error_messages = e.messages if hasattr(e, "messages") else [str(e)]

            logger.warning(
                "Service validation error (Django)",
                extra={
                    **context,
                    "error_type": "DjangoValidationError",
                    "error_messages": error_messages,
                    "action": "service_validation_error_django",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "medium",
                },
            )
            if hasattr(e, "error_dict"):
                raise DRFValidationError(e.message_dict)
            raise DRFValidationError(error_messages)

        except CurrencyConversionError as e:
            logger.warning(
                "Service currency conversion failed",
                extra={
                    **context,
                    "error_type": "CurrencyConversionError",
                    "currency": e.currency,
                    "error_message": e.message,
                    "action": "service_currency_error",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )
            raise DRFValidationError({"currency": [e.message]})

        except PermissionError as e:
            logger.warning(
                "Service permission denied (Python)",
                extra={
                    **context,
                    "error_type": "PermissionError",
                    "error_message": str(e),
                    "action": "service_permission_denied_python",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )
            raise DRFPermissionDenied(str(e))

        except ObjectDoesNotExist as e:
            logger.info(
                "Service object not found",
                extra={
                    **context,
                    "error_message": str(e),
                    "action": "service_object_not_found",
                    "component": "ServiceExceptionHandlerMixin",
                },
            )
            raise NotFound(str(e) or "Not found.")

        except APIException as e:
            logger.error(
                "Service API exception",
                extra={
                    **context,
                    "error_type": "APIException",
                    "error_detail": e.detail,
                    "status_code": e.status_code,
                    "action": "service_api_exception",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "high",
                },
            )
            raise

        except Exception as e:
            logger.error(
                "Service operation failed unexpectedly",
                extra={
                    **context,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "args_count": len(args),
                    "kwargs_keys": list(kwargs.keys()),
                    "action": "service_unexpected_error",
                    "component": "ServiceExceptionHandlerMixin",
                    "severity": "critical",
                },
                exc_info=True,  # Include full stack trace
            )

            # Generic API exception to prevent information leakage
            raise APIException(detail="Service operation failed", code="service_error")

        logger.debug(
            "Service call completed successfully",
            extra={
                **context,
                "result_type": type(result).__name__,
                "action": "service_call_success",
                "component": "ServiceExceptionHandlerMixin",
            },
        )
        return result
