"""API views for the reservations domain."""

from __future__ import annotations

import structlog
from rest_framework import mixins, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .domain.entities import ActingUser
from .exceptions import BookingError
from .filters import ReservationFilter
from .models import Reservation
from .permissions import CanReadReservations
from .serializers import ReservationCreateSerializer, ReservationSerializer, ResourceSerializer
from .services import get_booking_service

logger = structlog.get_logger(__name__)


class ReservationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset für Reservierungen: Kalenderdaten lesen, buchen, löschen."""

    queryset = Reservation.objects.all()
    serializer_class = ReservationSerializer
    filterset_class = ReservationFilter
    permission_classes = [CanReadReservations]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        return ReservationSerializer

    @property
    def service(self):
        return get_booking_service()

    def acting_user(self) -> ActingUser:
        return ActingUser.from_user(self.request.user)

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, BookingError):
            logger.warning(
                "reservation_request_rejected",
                action=self.action,
                code=exc.code,
                detail=exc.message,
                user=getattr(self.request.user, "pk", None),
            )
            return Response(exc.to_dict(), status=exc.status_code)
        return super().handle_exception(exc)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = self.service.create(serializer.to_request(), self.acting_user())
        logger.info(
            "reservation_created",
            reservation_id=reservation.id,
            resource=reservation.resource,
            date=reservation.date.isoformat(),
            window=f"{reservation.start_clock}-{reservation.end_clock}",
        )
        data = ReservationSerializer(reservation, context=self.get_serializer_context()).data
        return Response(data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None, *args, **kwargs):  # type: ignore
        removed = self.service.delete(pk, self.acting_user())
        logger.info("reservation_deleted", reservation_id=removed.id, resource=removed.resource)
        return Response(ReservationSerializer(removed).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"])
    def resources(self, request):  # type: ignore
        """Ressourcen, die die Rolle des Benutzers buchen darf."""
        resources = self.service.bookable_resources(self.acting_user())
        return Response(ResourceSerializer(resources, many=True).data)

    @action(detail=False, methods=["get"])
    def export(self, request):  # type: ignore
        """Vollständiger Schnappschuss für Auswertungen; nur für Admins."""
        reservations = self.service.export(self.acting_user())
        return Response(ReservationSerializer(reservations, many=True).data)
