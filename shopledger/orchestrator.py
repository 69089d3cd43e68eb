"""
Main Orchestrator for Shop Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Accounts (register → hash → store; login → verify)
2. Ledger (create / list / update / delete transactions, summaries)
3. Billing (sale → derive two transactions → one atomic write)
4. Insight (question → load ledger → build context → ask the LLM)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Storage performs no authorization; ownership is checked HERE
- Every flow receives an explicit RequestContext, never global state
- The assistant only ever sees a ShopContext
"""

from dataclasses import dataclass
from typing import Optional

from shopledger.agents import InsightAgent
from shopledger.auth import (
    AuthenticationError,
    PermissionDeniedError,
    RequestContext,
    hash_password,
    verify_password,
)
from shopledger.billing import derive_billing
from shopledger.models.insight import ShopContext
from shopledger.models.transaction import (
    BillingResult,
    CategoryShare,
    DateRange,
    MonthlyTotals,
    SaleRecord,
    Summary,
    Transaction,
    TransactionFields,
    TransactionType,
)
from shopledger.models.user import PublicUser, RegisterRequest
from shopledger.queries import (
    ShopContextBuilder,
    category_breakdown,
    monthly_breakdown,
    summarize,
)
from shopledger.services.storage import (
    DatabaseClient,
    DuplicateError,
    NotFoundError,
    SQLAlchemyTransactionStorage,
    SQLAlchemyUserStorage,
    TransactionStorageInterface,
    UserStorageInterface,
)
from shopledger.telemetry import get_logger


logger = get_logger(__name__)


class AccountFlow:
    """Registration and credential checks."""

    def __init__(self, user_storage: UserStorageInterface):
        self._users = user_storage

    async def register(self, request: RegisterRequest) -> PublicUser:
        """
        Create an account.

        Raises:
            DuplicateError: If the username is taken
        """
        if await self._users.get_user_by_username(request.username):
            raise DuplicateError("Username already exists")

        user = await self._users.create_user(
            username=request.username,
            name=request.name,
            password_hash=hash_password(request.password),
        )
        logger.info("user_registered", user_id=user.id, username=user.username)
        return user.to_public()

    async def authenticate(self, username: str, password: str) -> PublicUser:
        """
        Check credentials.

        Raises:
            AuthenticationError: Unknown user or wrong password; the
                message is the same for both
        """
        user = await self._users.get_user_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("login_failed", username=username)
            raise AuthenticationError("Invalid username or password")
        logger.info("login_succeeded", user_id=user.id)
        return user.to_public()

    async def get_user(self, user_id: int) -> Optional[PublicUser]:
        user = await self._users.get_user(user_id)
        return user.to_public() if user else None


class LedgerFlow:
    """
    Orchestrates transaction CRUD and summaries for one user.

    Update and delete look the transaction up first:
    - missing → NotFoundError
    - owned by someone else → PermissionDeniedError
    """

    def __init__(self, storage: TransactionStorageInterface):
        self._storage = storage

    async def list_transactions(
        self,
        ctx: RequestContext,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        if date_range is None:
            return await self._storage.list_transactions(ctx.user_id)
        return await self._storage.list_transactions(
            ctx.user_id,
            date_from=date_range.start,
            date_to=date_range.end,
        )

    async def create_transaction(
        self,
        ctx: RequestContext,
        fields: TransactionFields,
    ) -> Transaction:
        transaction = await self._storage.create_transaction(ctx.user_id, fields)
        logger.info(
            "transaction_created",
            user_id=ctx.user_id,
            transaction_id=transaction.id,
            type=transaction.type.value,
            amount=str(transaction.amount),
        )
        return transaction

    async def _get_owned(self, ctx: RequestContext, transaction_id: int) -> Transaction:
        transaction = await self._storage.get_transaction_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction not found")
        if transaction.user_id != ctx.user_id:
            logger.warning(
                "transaction_access_denied",
                user_id=ctx.user_id,
                transaction_id=transaction_id,
                owner_id=transaction.user_id,
            )
            raise PermissionDeniedError("Unauthorized to modify this transaction")
        return transaction

    async def update_transaction(
        self,
        ctx: RequestContext,
        transaction_id: int,
        fields: TransactionFields,
    ) -> Transaction:
        await self._get_owned(ctx, transaction_id)
        updated = await self._storage.update_transaction(transaction_id, fields)
        logger.info("transaction_updated", user_id=ctx.user_id, transaction_id=transaction_id)
        return updated

    async def delete_transaction(self, ctx: RequestContext, transaction_id: int) -> None:
        await self._get_owned(ctx, transaction_id)
        await self._storage.delete_transaction(transaction_id)
        logger.info("transaction_deleted", user_id=ctx.user_id, transaction_id=transaction_id)

    async def summary(
        self,
        ctx: RequestContext,
        date_range: Optional[DateRange] = None,
    ) -> Summary:
        return summarize(await self.list_transactions(ctx, date_range))

    async def monthly(self, ctx: RequestContext, months: int = 6) -> list[MonthlyTotals]:
        return monthly_breakdown(await self.list_transactions(ctx), months=months)

    async def categories(
        self,
        ctx: RequestContext,
        transaction_type: TransactionType,
        date_range: Optional[DateRange] = None,
    ) -> list[CategoryShare]:
        transactions = await self.list_transactions(ctx, date_range)
        return category_breakdown(transactions, transaction_type)


class BillingFlow:
    """
    Records a sale as an expense + profit pair.

    Both rows go through a single create_transactions call, so they
    are committed together or not at all.
    """

    def __init__(self, storage: TransactionStorageInterface):
        self._storage = storage

    async def record_sale(self, ctx: RequestContext, sale: SaleRecord) -> BillingResult:
        plan = derive_billing(sale)
        expense, profit = await self._storage.create_transactions(
            ctx.user_id,
            [plan.expense, plan.profit],
        )
        logger.info(
            "billing_recorded",
            user_id=ctx.user_id,
            product=sale.product_name,
            quantity=sale.quantity,
            expense_id=expense.id,
            profit_id=profit.id,
            total_profit=str(plan.total_profit),
        )
        return BillingResult(
            expense=expense,
            profit=profit,
            total_cost=plan.total_cost,
            total_sale=plan.total_sale,
            total_profit=plan.total_profit,
            margin_percent=plan.margin_percent,
        )


class InsightFlow:
    """
    Orchestrates the chatbot flow.

    FLOW:
    1. Load the user's full ledger (storage order)
    2. Build the bounded ShopContext
    3. Ask the InsightAgent, which never raises
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        agent: Optional[InsightAgent] = None,
        context_builder: Optional[ShopContextBuilder] = None,
    ):
        self._storage = storage
        self._agent = agent or InsightAgent()
        self._context_builder = context_builder or ShopContextBuilder()

    async def build_context(self, ctx: RequestContext) -> ShopContext:
        transactions = await self._storage.list_transactions(ctx.user_id)
        return self._context_builder.build(transactions)

    async def ask(self, ctx: RequestContext, question: str) -> str:
        shop_context = await self.build_context(ctx)
        return await self._agent.get_insight(ctx.user_id, question, shop_context)


@dataclass
class AppComponents:
    """Everything the HTTP layer needs, wired together."""

    database: DatabaseClient
    accounts: AccountFlow
    ledger: LedgerFlow
    billing: BillingFlow
    insight: InsightFlow


def create_app_components(
    database: Optional[DatabaseClient] = None,
    insight_agent: Optional[InsightAgent] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        database: Database client to use. Defaults to DATABASE_URL.
        insight_agent: Agent to answer questions. Tests pass a stub.
    """
    database = database or DatabaseClient()
    transaction_storage = SQLAlchemyTransactionStorage(database)
    user_storage = SQLAlchemyUserStorage(database)

    return AppComponents(
        database=database,
        accounts=AccountFlow(user_storage),
        ledger=LedgerFlow(transaction_storage),
        billing=BillingFlow(transaction_storage),
        insight=InsightFlow(transaction_storage, agent=insight_agent),
    )
