from django.urls import path
from . import views

app_name = 'company'

urlpatterns = [
    # GET    /api/settings/  - Current settings
    # PUT    /api/settings/  - Replace settings
    path('', views.CompanySettingsView.as_view(), name='settings'),
]
