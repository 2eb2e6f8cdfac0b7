from django.urls import path

from .views import (
    AccountDetailView,
    AccountListView,
    ApplyPaymentView,
    BillingCycleView,
    MaintenanceView,
    MonthlyReportTextView,
    MonthlyReportView,
    OverdueAccountsView,
    RecordUsageView,
    ReminderDispatchView,
    StatisticsView,
    TradeListView,
    health,
)

urlpatterns = [
    path("health/", health, name="billing-health"),
    path("accounts/", AccountListView.as_view(), name="account-list"),
    path("accounts/overdue/", OverdueAccountsView.as_view(), name="account-overdue"),
    path("accounts/<int:account_id>/", AccountDetailView.as_view(), name="account-detail"),
    path("accounts/<int:account_id>/usage/", RecordUsageView.as_view(), name="account-usage"),
    path("accounts/<int:account_id>/payments/", ApplyPaymentView.as_view(), name="account-payments"),
    path("accounts/<int:account_id>/maintenance/", MaintenanceView.as_view(), name="account-maintenance"),
    path("billing-cycles/", BillingCycleView.as_view(), name="billing-cycle"),
    path("reminders/", ReminderDispatchView.as_view(), name="reminder-dispatch"),
    path("trades/", TradeListView.as_view(), name="trade-list"),
    path("statistics/", StatisticsView.as_view(), name="statistics"),
    path("reports/monthly/", MonthlyReportView.as_view(), name="monthly-report"),
    path("reports/monthly/text/", MonthlyReportTextView.as_view(), name="monthly-report-text"),
]
