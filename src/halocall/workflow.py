"""Interactive customer setup workflow.

The run is a linear state machine::

    SELECT_CUSTOMER -> SELECT_LOCATION -> COLLECT_INPUTS -> CONFIRM -> EXECUTE -> DONE

Selections accumulate on a :class:`SetupContext`. Confirmation and execution
only operate on a :class:`SetupPlan`, which can only be built once a customer,
a location, a phone number and an agent id have all been collected. Nothing is
written before the operator confirms the plan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from rich.console import Console
from rich.markup import escape
from sqlalchemy.ext.asyncio import AsyncSession

from . import prompts
from .errors import NoCustomersError, NoLocationsError, ProvisioningError, SetupDeclined
from .formatting import format_address, is_valid_phone_number
from .models import AgentConfig, PhoneNumberConfig, User
from .services import customer_svc, provisioning_svc
from .services.customer_svc import CustomerSummary, LocationSummary

logger = logging.getLogger(__name__)


class SetupState(Enum):
    SELECT_CUSTOMER = "select_customer"
    SELECT_LOCATION = "select_location"
    COLLECT_INPUTS = "collect_inputs"
    CONFIRM = "confirm"
    EXECUTE = "execute"
    DONE = "done"


@dataclass(frozen=True)
class SetupPlan:
    customer: CustomerSummary
    location: LocationSummary
    phone_number: str
    agent_id: str
    user: User | None = None

    @property
    def user_id(self) -> str | None:
        return self.user.clerk_user_id if self.user else None


@dataclass
class SetupContext:
    customer: CustomerSummary | None = None
    location: LocationSummary | None = None
    phone_number: str | None = None
    agent_id: str | None = None
    user: User | None = None
    plan: SetupPlan | None = None

    def build_plan(self) -> SetupPlan:
        if not (self.customer and self.location and self.phone_number and self.agent_id):
            raise RuntimeError("Setup plan is incomplete")
        self.plan = SetupPlan(
            customer=self.customer,
            location=self.location,
            phone_number=self.phone_number,
            agent_id=self.agent_id,
            user=self.user,
        )
        return self.plan

    def require_customer(self) -> CustomerSummary:
        if self.customer is None:
            raise RuntimeError("No customer selected")
        return self.customer


@dataclass
class SetupResult:
    plan: SetupPlan
    phone_config: PhoneNumberConfig
    agent_config: AgentConfig
    access_granted: bool = False


class SetupWorkflow:
    """Walks one operator through linking a phone number and agent to a location."""

    def __init__(
        self,
        db: AsyncSession,
        console: Console,
        user_id: str | None = None,
        customer_limit: int = customer_svc.RECENT_CUSTOMER_LIMIT,
    ):
        self.db = db
        self.console = console
        self.preset_user_id = user_id.strip() if user_id else None
        self.customer_limit = customer_limit
        self.context = SetupContext()
        self.state = SetupState.SELECT_CUSTOMER
        self.result: SetupResult | None = None

    async def run(self) -> SetupResult:
        handlers = {
            SetupState.SELECT_CUSTOMER: self._select_customer,
            SetupState.SELECT_LOCATION: self._select_location,
            SetupState.COLLECT_INPUTS: self._collect_inputs,
            SetupState.CONFIRM: self._confirm,
            SetupState.EXECUTE: self._execute,
        }
        while self.state is not SetupState.DONE:
            logger.debug("Entering state %s", self.state.value)
            self.state = await handlers[self.state]()
        if self.result is None:
            raise RuntimeError("Setup finished without a result")
        return self.result

    async def _end_read(self) -> None:
        """Close the implicit read transaction before blocking on the operator."""
        await self.db.commit()

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    async def _select_customer(self) -> SetupState:
        prompts.print_step(self.console, 1, "Select a customer to set up")

        customers = await customer_svc.list_recent_active_customers(self.db, self.customer_limit)
        await self._end_read()
        if not customers:
            raise NoCustomersError(
                "No customers found.",
                hint="Make sure customers have connected Square first.",
            )

        self.console.print(prompts.customers_table(customers, title="Recently Connected Customers"))
        index = prompts.choose_index(self.console, "Choose a customer", len(customers))
        customer = customers[index]
        self.context.customer = customer

        self.console.print()
        prompts.print_details(
            self.console,
            [
                ("Selected", customer.clerk_organization_name),
                ("Org ID", customer.clerk_organization_id),
                ("Merchant", customer.merchant_id),
                ("Env", customer.environment),
            ],
        )
        return SetupState.SELECT_LOCATION

    async def _select_location(self) -> SetupState:
        prompts.print_step(self.console, 2, "Verify synced locations")
        customer = self.context.require_customer()

        locations = await customer_svc.list_locations(self.db, customer.clerk_organization_id)
        await self._end_read()
        if not locations:
            raise NoLocationsError(
                "No locations found for this organization.",
                hint="The customer may need to re-connect Square or check their Square account.",
            )

        self.console.print(prompts.locations_table(locations, title="Synced Locations"))

        candidates = [loc for loc in locations if not loc.has_phone_config]
        if not candidates:
            self.console.print("[green]All locations are already configured![/green]")
            if not prompts.ask_confirm(
                "Do you want to add another phone number to an existing location?",
                default=False,
            ):
                raise SetupDeclined("Exiting. No changes made.")
            candidates = locations

        self.console.print(
            prompts.locations_table(candidates, title="Locations Available", numbered=True)
        )
        index = prompts.choose_index(self.console, "Select a location to configure", len(candidates))
        location = candidates[index]
        self.context.location = location

        self.console.print()
        prompts.print_details(
            self.console,
            [
                ("Selected Location", str(location.id)),
                ("Merchant Location", location.merchant_location_id),
                ("Timezone", location.timezone),
                ("Address", format_address(location.address)),
            ],
        )
        return SetupState.COLLECT_INPUTS

    async def _collect_inputs(self) -> SetupState:
        prompts.print_step(self.console, 3, "Enter phone number and agent configuration")

        self.context.phone_number = await self._ask_phone_number()
        self.context.agent_id = prompts.ask_text(
            self.console, "ElevenLabs Agent ID", prompts.required("Agent ID")
        )
        self.context.user = await self._ask_user()
        return SetupState.CONFIRM

    async def _ask_phone_number(self) -> str:
        while True:
            phone_number = prompts.ask_text(
                self.console,
                "Phone number (E.164 format, e.g., +15551234567)",
                _validate_phone_number,
            )
            in_use = await provisioning_svc.phone_number_exists(self.db, phone_number)
            await self._end_read()
            if in_use:
                self.console.print(
                    f"[yellow]Phone number {phone_number} is already in use. "
                    "Please enter a different number.[/yellow]"
                )
                continue
            return phone_number

    async def _ask_user(self) -> User | None:
        user_id = self.preset_user_id
        if not user_id:
            if not prompts.ask_confirm(
                "Do you want to grant a specific user access to this location?",
                default=False,
            ):
                return None
            user_id = prompts.ask_text(
                self.console, "Clerk User ID (e.g., user_xxx)", prompts.required("User ID")
            )

        customer = self.context.require_customer()
        user = await customer_svc.find_user(self.db, user_id, customer.clerk_organization_id)
        await self._end_read()
        if user is None:
            logger.warning("User %s not in organization %s", user_id, customer.clerk_organization_id)
            self.console.print(
                f"[yellow]User {escape(user_id)} not found in this organization. "
                "Skipping user access.[/yellow]"
            )
            return None

        self.console.print(
            f"[green]✓ Found user: {escape(user.full_name or user_id)} "
            f"({escape(user.email or 'no email')})[/green]"
        )
        return user

    async def _confirm(self) -> SetupState:
        plan = self.context.build_plan()

        self.console.print()
        rows = [
            ("Organization", plan.customer.clerk_organization_name),
            ("Org ID", plan.customer.clerk_organization_id),
            ("Location ID", str(plan.location.id)),
            ("Address", format_address(plan.location.address)),
            ("Phone Number", plan.phone_number),
            ("Agent ID", plan.agent_id),
        ]
        if plan.user_id:
            rows.append(("User Access", plan.user_id))
        prompts.print_banner(self.console, "Configuration Summary")
        prompts.print_details(self.console, rows)
        self.console.print()

        if not prompts.ask_confirm("Create this configuration?", default=True):
            raise SetupDeclined("Setup cancelled. No changes made.")
        return SetupState.EXECUTE

    async def _execute(self) -> SetupState:
        plan = self.context.plan
        if plan is None:
            raise RuntimeError("Cannot execute an unconfirmed setup")

        self.console.print("\n[bold]Creating configuration...[/bold]\n")

        phone, agent = await provisioning_svc.provision_phone_agent(
            self.db, plan.phone_number, plan.location.id, plan.agent_id
        )
        self.console.print(f"  [green]✓[/green] Created phone_number_config (ID: {phone.id})")
        self.console.print(
            f"  [green]✓[/green] Created agent_config (phone_number_id: {agent.phone_number_id})"
        )
        self.result = SetupResult(plan=plan, phone_config=phone, agent_config=agent)

        if plan.user_id:
            try:
                _, created = await provisioning_svc.create_user_location_access(
                    self.db,
                    plan.customer.clerk_organization_id,
                    plan.user_id,
                    plan.location.id,
                )
            except ProvisioningError as exc:
                exc.hint = (
                    f"Phone number {plan.phone_number} and its agent were created. "
                    f"Grant user {plan.user_id} access manually."
                )
                raise
            self.result.access_granted = True
            if created:
                self.console.print(f"  [green]✓[/green] Granted location access to user {plan.user_id}")
            else:
                self.console.print(f"  [dim]User {plan.user_id} already had access to this location[/dim]")

        return SetupState.DONE


def _validate_phone_number(value: str) -> str | None:
    if not is_valid_phone_number(value):
        return "Invalid format. Use E.164 format (e.g., +15551234567)"
    return None
