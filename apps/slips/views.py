from django.http import HttpResponse
from django.template.loader import render_to_string
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from apps.company.store import get_settings_store
from .exceptions import SlipStoreError, to_api_exception
from .printing import build_print_copies
from .serializers import (
    NextSlipNumberSerializer,
    SlipCompleteInputSerializer,
    SlipCreateInputSerializer,
    SlipFilterSerializer,
    SlipSerializer,
    SlipSummarySerializer,
)
from .store import get_slip_store
from .domain import SlipStatus


class SlipViewSet(viewsets.ViewSet):
    """
    ViewSet for the slip lifecycle.

    list: Get all slips in creation order (filterable by status)
    create: Open a Pending slip (gross weighing)
    retrieve: Get one slip
    complete: Record the tare weighing of a Pending slip
    print: Render the two-copy print slip of a Complete slip
    summary: Pending/complete counts
    next_number: Number the next slip will receive

    Slips are never edited or deleted through the API; all writes go
    through the SlipStore.
    """

    permission_classes = [AllowAny]
    slip_store = None
    settings_store = None

    def get_store(self):
        return self.slip_store or get_slip_store()

    def get_settings_store(self):
        return self.settings_store or get_settings_store()

    @extend_schema(
        parameters=[OpenApiParameter('status', str, enum=SlipStatus.values, required=False)],
        responses={200: SlipSerializer(many=True)},
    )
    def list(self, request):
        """
        GET /api/slips/
        GET /api/slips/?status=Pending
        """
        filter_serializer = SlipFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        wanted = filter_serializer.validated_data.get('status')

        store = self.get_store()
        try:
            if wanted == SlipStatus.PENDING:
                slips = store.list_pending()
            elif wanted == SlipStatus.COMPLETE:
                slips = store.list_complete()
            else:
                slips = store.list()
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc

        return Response(SlipSerializer(slips, many=True).data)

    @extend_schema(request=SlipCreateInputSerializer, responses={201: SlipSerializer})
    def create(self, request):
        """
        POST /api/slips/
        Body: {"vehicleNumber": "MH12AB1234", "material": "Sand", "grossWeight": "12.500"}
        """
        input_serializer = SlipCreateInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)
        data = input_serializer.validated_data

        try:
            slip = self.get_store().create(
                vehicle_number=data['vehicleNumber'],
                material=data['material'],
                gross_weight=data['grossWeight'],
            )
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc

        return Response(SlipSerializer(slip).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: SlipSerializer})
    def retrieve(self, request, pk=None):
        """GET /api/slips/{id}/"""
        try:
            slip = self.get_store().get(pk)
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc
        return Response(SlipSerializer(slip).data)

    @extend_schema(request=SlipCompleteInputSerializer, responses={200: SlipSerializer})
    @action(detail=True, methods=['put'])
    def complete(self, request, pk=None):
        """
        PUT /api/slips/{id}/complete/
        Body: {"tareWeight": "4.200"}
        """
        input_serializer = SlipCompleteInputSerializer(data=request.data)
        input_serializer.is_valid(raise_exception=True)

        try:
            slip = self.get_store().complete(pk, input_serializer.validated_data['tareWeight'])
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc

        return Response(SlipSerializer(slip).data)

    @extend_schema(responses={(200, 'text/html'): OpenApiTypes.STR})
    @action(detail=True, methods=['get'])
    def print(self, request, pk=None):
        """
        GET /api/slips/{id}/print/

        Returns the HTML print slip (Customer Copy and Office Copy).
        """
        try:
            slip = self.get_store().get(pk)
            company = self.get_settings_store().for_rendering()
            copies = build_print_copies(slip, company)
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc

        html = render_to_string('slips/print.html', {
            'slip_number': slip.slip_number,
            'copies': copies,
        })
        return HttpResponse(html, content_type='text/html; charset=utf-8')

    @extend_schema(responses={200: SlipSummarySerializer})
    @action(detail=False, methods=['get'])
    def summary(self, request):
        """GET /api/slips/summary/"""
        try:
            counts = self.get_store().counts()
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc
        return Response(SlipSummarySerializer(counts).data)

    @extend_schema(responses={200: NextSlipNumberSerializer})
    @action(detail=False, methods=['get'], url_path='next-number')
    def next_number(self, request):
        """GET /api/slips/next-number/"""
        try:
            number = self.get_store().next_slip_number()
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc
        return Response(NextSlipNumberSerializer({'slipNumber': number}).data)
