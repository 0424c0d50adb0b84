"""Customer registration and manual loyalty adjustments."""

from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.loyalty.customer import Customer


@storefront.command(part_of="Customer")
class RegisterCustomer:
    customer_id = Identifier()
    name = String(required=True, max_length=255)
    email = String(max_length=254)
    loyalty_balance = Integer(default=0, min_value=0)


@storefront.command(part_of="Customer")
class AdjustLoyaltyBalance:
    customer_id = Identifier(required=True)
    delta = Integer(required=True)
    reason = String(required=True, max_length=255)


@storefront.command_handler(part_of=Customer)
class ManageCustomerHandler:
    @handle(RegisterCustomer)
    def register_customer(self, command):
        customer = Customer.register(
            name=command.name,
            email=command.email,
            customer_id=command.customer_id,
            loyalty_balance=command.loyalty_balance or 0,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)

    @handle(AdjustLoyaltyBalance)
    def adjust_loyalty_balance(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.adjust_balance(command.delta, command.reason)
        repo.add(customer)
        return customer.loyalty_balance
