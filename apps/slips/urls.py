from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'slips'

router = SimpleRouter()
router.register(r'', views.SlipViewSet, basename='slip')

urlpatterns = [
    # GET    /api/slips/                 - List slips (?status=Pending|Complete)
    # POST   /api/slips/                 - Create Pending slip
    # GET    /api/slips/summary/         - Pending/complete counts
    # GET    /api/slips/next-number/     - Next slip number preview
    # GET    /api/slips/{id}/            - Get slip
    # PUT    /api/slips/{id}/complete/   - Record tare weight
    # GET    /api/slips/{id}/print/      - Two-copy print slip (HTML)
    path('', include(router.urls)),
]
