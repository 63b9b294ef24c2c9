from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

PropMigration = Callable[[dict[str, Any]], dict[str, Any]]


def migrate_navbar_sticky_to_fixed(props: dict[str, Any]) -> dict[str, Any]:
    """The navbar used to expose ``sticky``; the current block uses ``fixed``.

    ``sticky`` is honored only while ``fixed`` is unset, and is always dropped.
    """
    migrated = dict(props)
    if not isinstance(migrated.get("fixed"), bool):
        sticky = migrated.get("sticky")
        migrated["fixed"] = sticky if isinstance(sticky, bool) else True
    if not isinstance(migrated.get("reserveSpace"), bool):
        migrated["reserveSpace"] = True
    migrated.pop("sticky", None)
    return migrated


# name -> (block type the migration applies to, migration)
PROP_MIGRATIONS: Mapping[str, tuple[str, PropMigration]] = MappingProxyType(
    {
        "navbar-sticky-to-fixed": ("StoreNavbar", migrate_navbar_sticky_to_fixed),
    }
)

LEGACY_BLOCK_TYPE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "ProductGrid": "ProductCatalog",
        "ProductList": "ProductCatalog",
        "CatalogGrid": "ProductCatalog",
        "HeaderStore": "StoreHeader",
        "StoreInfoHeader": "StoreHeader",
        "StickyNavbar": "StoreNavbar",
    }
)


@dataclass(frozen=True)
class AliasTable:
    type_aliases: Mapping[str, str] = field(default_factory=dict)
    prop_migrations: Mapping[str, PropMigration] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type_aliases", MappingProxyType(dict(self.type_aliases)))
        object.__setattr__(self, "prop_migrations", MappingProxyType(dict(self.prop_migrations)))

    def resolve_type(self, block_type: str) -> str:
        return self.type_aliases.get(block_type, block_type)

    def migrate_props(self, block_type: str, props: dict[str, Any]) -> dict[str, Any]:
        migration = self.prop_migrations.get(block_type)
        if migration is None:
            return dict(props)
        return migration(props)


def build_alias_table(
    *,
    type_aliases: Mapping[str, str] | None = None,
    migration_names: list[str] | tuple[str, ...] = (),
) -> AliasTable:
    migrations: dict[str, PropMigration] = {}
    for name in migration_names:
        registered = PROP_MIGRATIONS.get(name)
        if registered is None:
            raise ValueError(f"Unknown layout property migration: {name}")
        block_type, migration = registered
        if block_type in migrations:
            raise ValueError(f"Block type {block_type} has more than one property migration")
        migrations[block_type] = migration
    return AliasTable(type_aliases=dict(type_aliases or {}), prop_migrations=migrations)


EMPTY_ALIAS_TABLE = AliasTable()

CATALOG_ALIAS_TABLE = build_alias_table(
    type_aliases=LEGACY_BLOCK_TYPE_ALIASES,
    migration_names=["navbar-sticky-to-fixed"],
)

# Referenced by name from layout family definitions.
ALIAS_TABLES: Mapping[str, AliasTable] = MappingProxyType({"catalog": CATALOG_ALIAS_TABLE})
