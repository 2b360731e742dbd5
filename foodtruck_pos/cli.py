# Operator commands (run with the package installed):
# - foodtruck-pos init-db
#   Create tables and the default admin and seller accounts if missing.
# - foodtruck-pos export-db --output backup/
#   Write users, categories, products and sales to one JSON file per table.
# - foodtruck-pos serve --host 0.0.0.0 --port 3000
#   Run the API with uvicorn.
#
# Every command accepts --database-url (defaults to $DATABASE_URL).

import json
import logging
from pathlib import Path

import click

from foodtruck_pos.config import get_settings
from foodtruck_pos.database import Database
from foodtruck_pos.models.catalog import Category, Product
from foodtruck_pos.models.sale import Sale
from foodtruck_pos.models.user import User, UserRole
from foodtruck_pos.schemas.catalog import CategoryResponse, ProductResponse
from foodtruck_pos.schemas.sale import SaleResponse
from foodtruck_pos.schemas.user import UserCreate, UserResponse
from foodtruck_pos.services.user_service import UserService

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    UserCreate(username="admin", password="admin123", role=UserRole.ADMIN, name="Administrador"),
    UserCreate(username="Patricio", password="123456", role=UserRole.SELLER, name="Vendedor Patricio"),
]

EXPORTS = [
    ("users", User, UserResponse),
    ("categories", Category, CategoryResponse),
    ("products", Product, ProductResponse),
    ("sales", Sale, SaleResponse),
]


@click.group()
@click.option("--database-url", envvar="DATABASE_URL", default=None, help="Database to operate on.")
@click.pass_context
def cli(ctx, database_url):
    """MyFoodTruck POS operator commands."""
    ctx.obj = Database(database_url or get_settings().DATABASE_URL)


@cli.command("init-db")
@click.pass_obj
def init_db(database: Database):
    """Create tables and seed the default users (idempotent)."""
    database.create_all()

    db = database.session()
    try:
        service = UserService(db)
        for user_data in DEFAULT_USERS:
            if service.get_by_username(user_data.username):
                click.echo(f"User {user_data.username} already exists")
                continue
            service.create_user(user_data)
            click.echo(f"User created: {user_data.username} / {user_data.password} ({user_data.role.value})")
    finally:
        db.close()

    click.echo("Database initialized successfully")


@cli.command("export-db")
@click.option("--output", "output_dir", default="backup", show_default=True,
              type=click.Path(file_okay=False, path_type=Path), help="Directory for the JSON files.")
@click.pass_obj
def export_db(database: Database, output_dir: Path):
    """Dump every table to <output>/<table>.json. Passwords are not exported."""
    output_dir.mkdir(parents=True, exist_ok=True)

    db = database.session()
    try:
        for table, model, schema in EXPORTS:
            rows = db.query(model).order_by(model.id).all()
            data = [schema.model_validate(row).model_dump(by_alias=True, mode="json") for row in rows]

            path = output_dir / f"{table}.json"
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            click.echo(f"{table}: {len(data)} rows exported to {path}")
    finally:
        db.close()


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=3000, show_default=True, type=int)
def serve(host, port):
    """Run the API server."""
    import uvicorn

    uvicorn.run("foodtruck_pos.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
