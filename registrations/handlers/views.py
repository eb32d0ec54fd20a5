"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.permissions import IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from registrations.domain.errors import DomainError, ErrorCode
from registrations.handlers.serializers import (
    AdminNoteSerializer,
    AdminPatchSerializer,
    CancellationInputSerializer,
    CancellationRequestSerializer,
    CreateRegistrationSerializer,
    DiscountCodeInputSerializer,
    DiscountValidationSerializer,
    PaymentCompletionSerializer,
    PriceQuoteSerializer,
    RegistrationDraftSerializer,
    RegistrationSerializer,
    UserPatchSerializer,
)
from registrations.services.cancellation_service import CancellationService
from registrations.services.registration_service import RegistrationService
from registrations.stores.django_store import (
    DjangoCancellationRequestStore,
    DjangoDiscountCodeStore,
    DjangoEventStore,
    DjangoRegistrationStore,
)

ERROR_STATUS = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.REGISTRATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CANCELLATION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DISCOUNT_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DISCOUNT_CODE_REJECTED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.ACTIVITY_FULL: status.HTTP_409_CONFLICT,
    ErrorCode.REGISTRATION_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCode.CANCELLATION_ALREADY_PENDING: status.HTTP_409_CONFLICT,
    ErrorCode.CANCELLATION_ALREADY_PROCESSED: status.HTTP_409_CONFLICT,
    ErrorCode.PAYMENT_REFERENCE_REQUIRED: status.HTTP_400_BAD_REQUEST,
}


def registration_service() -> RegistrationService:
    return RegistrationService(DjangoEventStore(), DjangoRegistrationStore(), DjangoDiscountCodeStore())


def cancellation_service() -> CancellationService:
    return CancellationService(DjangoRegistrationStore(), DjangoCancellationRequestStore())


def error_response(error: DomainError) -> Response:
    return Response(
        {"error": {"code": error.code.value, "message": error.message}},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


class PriceQuoteView(APIView):
    """Handler for POST /api/events/{event_id}/price-quote"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = RegistrationDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            quote = registration_service().compute_registration_price(event_id, serializer.to_draft())
        except DomainError as error:
            return error_response(error)
        return Response(PriceQuoteSerializer(quote).data)


class DiscountCodeValidateView(APIView):
    """Handler for POST /api/events/{event_id}/discount-codes/validate"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = DiscountCodeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = registration_service().validate_discount_code(event_id, serializer.validated_data["code"])
        except DomainError as error:
            return error_response(error)
        return Response(DiscountValidationSerializer(result).data)


class ActivityCapacityView(APIView):
    """Handler for GET /api/events/{event_id}/activities/{activity}/capacity"""

    def get(self, request: Request, event_id: str, activity: str) -> Response:
        try:
            available = registration_service().check_activity_capacity(
                event_id,
                activity,
                request.query_params.get("exclude"),
            )
        except DomainError as error:
            return error_response(error)
        return Response({"activity": activity, "available": available})


class RegistrationCreateView(APIView):
    """Handler for POST /api/registrations"""

    def post(self, request: Request) -> Response:
        serializer = CreateRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        privileged = bool(request.user and request.user.is_staff)
        payment_reference = data.get("payment_reference") or None
        try:
            registration = registration_service().create_registration(
                str(data["event_id"]),
                serializer.to_draft(),
                serializer.attendee(),
                privileged=privileged,
                marked_paid=data["paid"] and (privileged or payment_reference is not None),
                user_id=request.user.pk if request.user.is_authenticated else None,
                payment_reference=payment_reference,
            )
        except DomainError as error:
            return error_response(error)
        return Response(RegistrationSerializer(registration).data, status=status.HTTP_201_CREATED)


class RegistrationDetailView(APIView):
    """Handler for GET/PATCH /api/registrations/{registration_id}"""

    def get(self, request: Request, registration_id: str) -> Response:
        try:
            registration = registration_service().get_registration(registration_id)
        except DomainError as error:
            return error_response(error)
        return Response(RegistrationSerializer(registration).data)

    def patch(self, request: Request, registration_id: str) -> Response:
        serializer = UserPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            registration = registration_service().update_registration_as_user(
                registration_id, serializer.to_patch()
            )
        except DomainError as error:
            return error_response(error)
        return Response(RegistrationSerializer(registration).data)


class AdminRegistrationView(APIView):
    """Handler for PATCH /api/admin/registrations/{registration_id}"""

    permission_classes = [IsAdminUser]

    def patch(self, request: Request, registration_id: str) -> Response:
        serializer = AdminPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            result = registration_service().update_registration_as_admin(
                registration_id, serializer.to_patch()
            )
        except DomainError as error:
            return error_response(error)
        return Response(
            {
                "registration": RegistrationSerializer(result.registration).data,
                "pending_delta": f"{result.pending_delta:.2f}",
                "reason": result.reason,
                "inconsistent": result.inconsistent,
            }
        )


class PaymentCompletionView(APIView):
    """Handler for POST /api/registrations/{registration_id}/complete-payment"""

    def post(self, request: Request, registration_id: str) -> Response:
        serializer = PaymentCompletionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            registration = registration_service().complete_payment(
                registration_id,
                serializer.validated_data["payment_reference"],
            )
        except DomainError as error:
            return error_response(error)
        return Response(RegistrationSerializer(registration).data)


class CancellationRequestView(APIView):
    """Handler for POST /api/registrations/{registration_id}/cancel-request"""

    def post(self, request: Request, registration_id: str) -> Response:
        serializer = CancellationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cancellation = cancellation_service().request_cancellation(
                registration_id,
                serializer.validated_data.get("reason") or None,
            )
        except DomainError as error:
            return error_response(error)
        return Response(CancellationRequestSerializer(cancellation).data, status=status.HTTP_201_CREATED)


class AdminCancellationListView(APIView):
    """Handler for GET /api/admin/cancel-requests"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        requests = cancellation_service().list_requests(request.query_params.get("status", "pending"))
        return Response(CancellationRequestSerializer(requests, many=True).data)


class AdminCancellationDecisionView(APIView):
    """Handler for POST /api/admin/cancel-requests/{request_id}/approve and .../reject"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, request_id: int, decision: str) -> Response:
        serializer = AdminNoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = serializer.validated_data.get("admin_note") or None
        service = cancellation_service()
        try:
            if decision == "approve":
                registration = service.approve(request_id, note)
                return Response(RegistrationSerializer(registration).data)
            cancellation = service.reject(request_id, note)
        except DomainError as error:
            return error_response(error)
        return Response(CancellationRequestSerializer(cancellation).data)
