"""
DRF serializers for the billing API.

Input serializers validate and coerce request payloads before they reach the
use cases. Output serializers read plain domain objects (Account, Bill,
MaintenanceEntry, TradeRecord); time-dependent fields such as ``overdue``
are evaluated against ``context["now"]``.
"""

from rest_framework import serializers

from billing.domain.entities import EnergyCategory


# Input

class AccountCreateSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    name = serializers.CharField(max_length=200)
    email = serializers.EmailField()
    address = serializers.CharField(max_length=300, allow_blank=True, default="")
    province = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=EnergyCategory.choices)
    allocation = serializers.FloatField()

    def validate_allocation(self, value):
        if value <= 0:
            raise serializers.ValidationError("allocation must be positive.")
        return value


class UsageSerializer(serializers.Serializer):
    amount = serializers.FloatField(min_value=0)


class PaymentSerializer(serializers.Serializer):
    bill_index = serializers.IntegerField()
    amount = serializers.FloatField(min_value=0)


class MaintenanceSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=500)
    cost = serializers.FloatField()


class TradeCreateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=EnergyCategory.choices)
    quantity = serializers.FloatField()
    price_per_unit = serializers.FloatField()
    is_import = serializers.BooleanField()


class AsOfSerializer(serializers.Serializer):
    """Optional point in time for overdue and reporting queries."""

    as_of = serializers.DateTimeField(required=False)


# Output

class BillSerializer(serializers.Serializer):
    amount = serializers.FloatField()
    issued_at = serializers.DateTimeField()
    paid = serializers.BooleanField()
    days_since_issue = serializers.SerializerMethodField()
    overdue = serializers.SerializerMethodField()

    def get_days_since_issue(self, bill):
        return bill.days_since_issue(self.context.get("now"))

    def get_overdue(self, bill):
        return bill.is_overdue(self.context.get("now"))


class MaintenanceEntrySerializer(serializers.Serializer):
    timestamp = serializers.DateTimeField()
    description = serializers.CharField()
    cost = serializers.FloatField()


class AccountSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    province = serializers.CharField()
    category = serializers.CharField()
    allocation = serializers.FloatField()
    usage = serializers.FloatField()
    remaining = serializers.FloatField()
    total_owed = serializers.SerializerMethodField()

    def get_total_owed(self, account):
        return account.total_owed()


class AccountDetailSerializer(AccountSummarySerializer):
    address = serializers.CharField()
    category_label = serializers.CharField(source="category.label")
    reminder_sent = serializers.BooleanField()
    has_overdue_bills = serializers.SerializerMethodField()
    bills = BillSerializer(many=True)
    maintenance_log = MaintenanceEntrySerializer(many=True)

    def get_has_overdue_bills(self, account):
        return account.has_overdue_bills(self.context.get("now"))


class TradeSerializer(serializers.Serializer):
    category = serializers.CharField()
    quantity = serializers.FloatField()
    price_per_unit = serializers.FloatField()
    is_import = serializers.BooleanField()
    timestamp = serializers.DateTimeField()
    value = serializers.FloatField()
