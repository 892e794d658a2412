"""Composition root.

``build_container`` wires one store, registry, provisioner and executor and
every repository and service on top of them. Nothing here opens
connections; the FastAPI lifespan (or the caller) opens and closes the
store.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config.settings import LexdeskSettings, get_settings
from .database.connection import DatabaseStore
from .database.protocols import Store
from .features.clients.repositories.client_repository import ClientRepository
from .features.dashboard.services.dashboard_service import DashboardService
from .features.invoices.repositories.invoice_repository import InvoiceRepository
from .features.notifications.repositories.notification_repository import NotificationRepository
from .features.projects.repositories.project_repository import ProjectRepository
from .features.publications.repositories.publication_repository import PublicationRepository
from .features.registration_keys.repositories.registration_key_repository import RegistrationKeyRepository
from .features.registration_keys.services.registration_key_service import RegistrationKeyService
from .features.tasks.repositories.task_repository import TaskRepository
from .features.tenancy.entities.tenant import ProvisioningPolicy
from .features.tenancy.repositories.schema_registry import TenantSchemaRegistry
from .features.tenancy.repositories.tenant_repository import TenantRepository
from .features.tenancy.services.provisioner import SchemaProvisioner
from .features.tenancy.services.query_executor import TenantQueryExecutor
from .features.tenancy.services.tenant_service import TenantService
from .features.transactions.repositories.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Everything a request handler or script needs, built once per process."""

    settings: LexdeskSettings
    store: Store
    registry: TenantSchemaRegistry
    provisioner: SchemaProvisioner
    executor: TenantQueryExecutor
    tenants: TenantService
    registration_keys: RegistrationKeyService
    clients: ClientRepository
    projects: ProjectRepository
    tasks: TaskRepository
    transactions: TransactionRepository
    invoices: InvoiceRepository
    publications: PublicationRepository
    notifications: NotificationRepository
    dashboard: DashboardService

    async def startup(self, bootstrap_admin: bool = True) -> None:
        """Open the store and make sure the admin tables exist."""
        if isinstance(self.store, DatabaseStore):
            await self.store.open()
        if bootstrap_admin:
            await self.provisioner.bootstrap_admin()
        logger.info(
            f"{self.settings.app_name} ready (policy={self.executor.policy.value}, "
            f"admin_schema={self.registry.admin_schema})"
        )

    async def shutdown(self) -> None:
        if isinstance(self.store, DatabaseStore):
            await self.store.close()


def build_container(settings: Optional[LexdeskSettings] = None, store: Optional[Store] = None) -> Container:
    """Wire the object graph. ``store`` overrides the asyncpg store (tests)."""
    settings = settings or get_settings()
    if store is None:
        store = DatabaseStore(
            settings.database_url,
            application_name=settings.app_name,
            **settings.get_pool_config(),
        )

    registry = TenantSchemaRegistry(store, settings.admin_schema, settings.tenant_schema_prefix)
    registration_keys = RegistrationKeyRepository(store, registry)
    provisioner = SchemaProvisioner(store, registry)
    executor = TenantQueryExecutor(
        store,
        registry,
        provisioner=provisioner,
        policy=ProvisioningPolicy(settings.provisioning_policy),
    )
    pages = {"default_page_size": settings.default_page_size, "max_page_size": settings.max_page_size}

    clients = ClientRepository(executor, **pages)
    projects = ProjectRepository(executor, **pages)
    tasks = TaskRepository(executor, **pages)
    transactions = TransactionRepository(executor, **pages)
    invoices = InvoiceRepository(executor, **pages)
    publications = PublicationRepository(executor, **pages)
    notifications = NotificationRepository(executor, **pages)

    return Container(
        settings=settings,
        store=store,
        registry=registry,
        provisioner=provisioner,
        executor=executor,
        tenants=TenantService(
            TenantRepository(store, registry),
            provisioner,
            settings.tenant_schema_prefix,
            registration_keys=registration_keys,
        ),
        registration_keys=RegistrationKeyService(store, registration_keys),
        clients=clients,
        projects=projects,
        tasks=tasks,
        transactions=transactions,
        invoices=invoices,
        publications=publications,
        notifications=notifications,
        dashboard=DashboardService(executor, clients, projects, tasks, transactions, invoices, publications),
    )
