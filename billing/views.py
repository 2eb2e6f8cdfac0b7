"""
API Layer — Billing Ledger Endpoints (Django REST Framework)

This module exposes the HTTP interface for the billing ledger.

Design intent:

The views are thin controllers. Their responsibilities are limited to:

- Input validation and type coercion via DRF serializers
- Delegation to the application use cases (or read-only ledger queries)
- Translation of domain exceptions into HTTP responses

Exception mapping:

- AccountNotFound, InvalidBillIndex      -> 404
- DuplicateID                            -> 409
- UsageExceeded, InvalidUsageAmount,
  InvalidMaintenanceCost, InvalidTrade   -> 422
- Malformed payloads                     -> 400

Time-sensitive endpoints accept an optional ISO-8601 ``as_of`` so the
overdue threshold can be evaluated at a chosen instant.
"""

from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.views import APIView

from billing.application import use_cases
from billing.domain.exceptions import (
    AccountNotFound,
    DuplicateID,
    InvalidBillIndex,
    InvalidMaintenanceCost,
    InvalidTrade,
    InvalidUsageAmount,
    UsageExceeded,
)
from billing.rendering import render_report
from billing.serializers import (
    AccountCreateSerializer,
    AccountDetailSerializer,
    AccountSummarySerializer,
    AsOfSerializer,
    MaintenanceEntrySerializer,
    MaintenanceSerializer,
    PaymentSerializer,
    TradeCreateSerializer,
    TradeSerializer,
    UsageSerializer,
)
from billing.store import get_ledger


def _as_of(data):
    serializer = AsOfSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data.get("as_of")


def _not_found(exc):
    return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)


def _unprocessable(exc):
    return Response({"error": str(exc)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)


@api_view(["GET"])
def health(request):
    return Response({"status": "ok"})


class AccountListView(APIView):
    """
    GET  /api/billing/accounts/?q=&province=   search by id, name or email
    POST /api/billing/accounts/                open an account
    """

    def get(self, request):
        query = request.query_params.get("q", "")
        province = request.query_params.get("province", "")
        accounts = get_ledger().find_accounts(query, province)
        return Response(AccountSummarySerializer(accounts, many=True).data)

    def post(self, request):
        serializer = AccountCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            account = use_cases.open_account(
                account_id=data["id"],
                name=data["name"],
                email=data["email"],
                address=data["address"],
                province=data["province"],
                category=data["category"],
                allocation=data["allocation"],
            )
        except DuplicateID as exc:
            return Response({"error": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(AccountSummarySerializer(account).data, status=status.HTTP_201_CREATED)


class OverdueAccountsView(APIView):
    """GET /api/billing/accounts/overdue/"""

    def get(self, request):
        now = _as_of(request.query_params)
        accounts = get_ledger().overdue_accounts(now=now)
        return Response(AccountSummarySerializer(accounts, many=True).data)


class AccountDetailView(APIView):
    """GET /api/billing/accounts/<id>/"""

    def get(self, request, account_id):
        now = _as_of(request.query_params)
        try:
            account = get_ledger().get_account(account_id)
        except AccountNotFound as exc:
            return _not_found(exc)

        serializer = AccountDetailSerializer(account, context={"now": now})
        return Response(serializer.data)


class RecordUsageView(APIView):
    """POST /api/billing/accounts/<id>/usage/"""

    def post(self, request, account_id):
        serializer = UsageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = use_cases.record_usage(account_id, serializer.validated_data["amount"])
        except AccountNotFound as exc:
            return _not_found(exc)
        except (UsageExceeded, InvalidUsageAmount) as exc:
            return _unprocessable(exc)

        return Response(result, status=status.HTTP_200_OK)


class ApplyPaymentView(APIView):
    """
    POST /api/billing/accounts/<id>/payments/

    A payment short of the bill amount is refused without error: the
    response reports ``paid: false`` and the bill stays open.
    """

    def post(self, request, account_id):
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = use_cases.apply_payment(account_id, data["bill_index"], data["amount"])
        except (AccountNotFound, InvalidBillIndex) as exc:
            return _not_found(exc)

        return Response(result, status=status.HTTP_200_OK)


class MaintenanceView(APIView):
    """POST /api/billing/accounts/<id>/maintenance/"""

    def post(self, request, account_id):
        serializer = MaintenanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            entry = use_cases.add_maintenance(account_id, data["description"], data["cost"])
        except AccountNotFound as exc:
            return _not_found(exc)
        except InvalidMaintenanceCost as exc:
            return _unprocessable(exc)

        return Response(MaintenanceEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class BillingCycleView(APIView):
    """POST /api/billing/billing-cycles/"""

    def post(self, request):
        now = _as_of(request.data)
        return Response(use_cases.run_billing_cycle(now=now), status=status.HTTP_200_OK)


class ReminderDispatchView(APIView):
    """POST /api/billing/reminders/"""

    def post(self, request):
        now = _as_of(request.data)
        return Response(use_cases.dispatch_reminders(now=now), status=status.HTTP_200_OK)


class TradeListView(APIView):
    """
    GET  /api/billing/trades/
    POST /api/billing/trades/
    """

    def get(self, request):
        return Response(TradeSerializer(get_ledger().trades(), many=True).data)

    def post(self, request):
        serializer = TradeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            trade = use_cases.record_trade(**serializer.validated_data)
        except InvalidTrade as exc:
            return _unprocessable(exc)

        return Response(TradeSerializer(trade).data, status=status.HTTP_201_CREATED)


class StatisticsView(APIView):
    """GET /api/billing/statistics/"""

    def get(self, request):
        now = _as_of(request.query_params)
        stats = get_ledger().statistics(now=now)
        return Response({
            province: {
                "customer_count": entry.customer_count,
                "total_allocated": entry.total_allocated,
                "total_used": entry.total_used,
                "total_unpaid": entry.total_unpaid,
                "overdue_count": entry.overdue_count,
                "usage_percentage": entry.usage_percentage,
                "overdue_percentage": entry.overdue_percentage,
            }
            for province, entry in stats.items()
        })


class MonthlyReportView(APIView):
    """GET /api/billing/reports/monthly/"""

    def get(self, request):
        now = _as_of(request.query_params)
        return Response(use_cases.build_monthly_report(now=now).as_dict())


class MonthlyReportTextView(APIView):
    """GET /api/billing/reports/monthly/text/"""

    def get(self, request):
        now = _as_of(request.query_params)
        report = use_cases.build_monthly_report(now=now)
        return HttpResponse(render_report(report), content_type="text/plain; charset=utf-8")
