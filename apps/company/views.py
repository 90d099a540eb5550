from drf_spectacular.utils import extend_schema
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.slips.exceptions import SlipStoreError, to_api_exception
from .serializers import CompanySettingsSerializer
from .store import get_settings_store


class CompanySettingsView(APIView):
    """
    GET /api/settings/  - Current settings (placeholder identity if never saved)
    PUT /api/settings/  - Replace settings
    """

    permission_classes = [AllowAny]
    settings_store = None

    def get_store(self):
        return self.settings_store or get_settings_store()

    @extend_schema(responses={200: CompanySettingsSerializer})
    def get(self, request):
        try:
            company = self.get_store().get()
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc
        return Response(CompanySettingsSerializer(company).data)

    @extend_schema(request=CompanySettingsSerializer, responses={200: CompanySettingsSerializer})
    def put(self, request):
        serializer = CompanySettingsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            company = self.get_store().save({
                'companyName': serializer.validated_data['company_name'],
                'address': serializer.validated_data['address'],
            })
        except SlipStoreError as exc:
            raise to_api_exception(exc) from exc

        return Response(CompanySettingsSerializer(company).data)
