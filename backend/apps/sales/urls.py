from django.urls import path

from .views import SalesListView, SalesSummaryView

urlpatterns = [
    path("", SalesListView.as_view(), name="sales-list"),
    path("summary/", SalesSummaryView.as_view(), name="sales-summary"),
]
