"""Dependency wiring helpers."""

from fastapi import FastAPI

from .accounts.accounts_api import router as accounts_router
from .accounts.accounts_repository import AccountStore, InMemoryAccountStore
from .accounts.accounts_service import AccountService
from .billing.billing_api import router as billing_router
from .billing.billing_client import BillingClient
from .billing.billing_service import BillingEventHandler
from .config import AppConfig
from .cuts.cut_service import CutPipeline
from .cuts.cuts_api import router as cuts_router
from .ingest.validation import UploadValidator
from .storage.cloudinary_store import CloudinaryStore
from .storage.remote_store import RemoteStore


def build_store(config: AppConfig) -> RemoteStore:
    return CloudinaryStore(
        cloud_name=config.cloudinary_cloud_name,
        api_key=config.cloudinary_api_key,
        api_secret=config.cloudinary_api_secret,
        timeout_seconds=config.store_timeout_seconds,
    )


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    store: RemoteStore | None = None,
    account_store: AccountStore | None = None,
    billing_client: BillingClient | None = None,
) -> None:
    """Mount module routers and attach services."""
    validator = UploadValidator(config.ingest_limits())
    cut_pipeline = CutPipeline(
        validator=validator,
        store=store if store is not None else build_store(config),
        folder=config.store_folder,
        store_timeout_seconds=config.store_timeout_seconds,
    )
    if account_store is None:
        account_store = InMemoryAccountStore()
    account_service = AccountService(store=account_store)
    billing = billing_client or BillingClient(
        secret_key=config.stripe_secret_key,
        price_id=config.stripe_price_id,
        frontend_url=config.frontend_url,
        webhook_secret=config.stripe_webhook_secret,
        timeout_seconds=config.billing_timeout_seconds,
    )

    app.state.config = config
    app.state.cut_pipeline = cut_pipeline
    app.state.account_service = account_service
    app.state.billing_client = billing
    app.state.billing_event_handler = BillingEventHandler(accounts=account_service)

    app.include_router(cuts_router)
    app.include_router(accounts_router)
    app.include_router(billing_router)
