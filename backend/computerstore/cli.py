# Overview: Flask CLI command groups for bootstrap, back-office jobs and inspection.

# backend/computerstore/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Use: flask --app computerstore <group> <command> [options]
#
# System bootstrap:
# - flask --app computerstore system init-db
#   Create all tables that do not exist yet.
# - flask --app computerstore system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - flask --app computerstore system seed
#   Load demo suppliers, store points, registers, sellers and equipment (skipped if data exists).
#
# Weekly ordering:
# - flask --app computerstore orders weekly --week-start 2026-10-12
#   Fold the week's unprocessed customer orders into supplier orders.
#
# Cash registers:
# - flask --app computerstore registers check-limit --register-id 1 [--date 2026-10-19]
#   Reconcile a register's day against its cash limit (records at most one violation per day).
# - flask --app computerstore registers violations [--register-id 1]
#   List recorded cash limit violations.
#
# Equipment:
# - flask --app computerstore equipment transfer --equipment-id 5 --store-point-id 2
#   Move a unit from the central warehouse to a store point floor.

import click
from flask.cli import with_appcontext

from .errors import StoreError
from .extensions import db
from .money import money_str
from .time_utils import utcnow


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate all tables."""
    if not yes:
        click.confirm("This deletes ALL data. Continue?", abort=True)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@system_group.command('seed')
@with_appcontext
def seed():
    """Load demo data into an empty database."""
    from .services.seed_service import seed_demo_data

    if seed_demo_data():
        click.echo("PASS Demo data loaded")
    else:
        click.echo("SKIP Database already contains suppliers")


@click.group('orders')
def orders_group():
    """Customer and supplier order jobs."""


@orders_group.command('weekly')
@click.option('--week-start', type=click.DateTime(formats=["%Y-%m-%d"]), required=True, help='First day of the week')
@with_appcontext
def weekly_orders_cli(week_start):
    """
    Generate weekly supplier orders.

    Example:
        flask --app computerstore orders weekly --week-start 2026-10-12
    """
    from .services import order_service

    orders = order_service.generate_weekly_supplier_orders(week_start)
    if not orders:
        click.echo("No unprocessed customer orders for that week.")
        return

    for order in orders:
        click.echo(f"  #{order.id} supplier={order.supplier_id} {order.order_details}")
    click.echo(f"PASS Created {len(orders)} supplier order(s)")


@click.group('registers')
def registers_group():
    """Cash register inspection commands."""


@registers_group.command('check-limit')
@click.option('--register-id', type=int, required=True, help='Cash register ID')
@click.option('--date', 'on_date', type=click.DateTime(formats=["%Y-%m-%d"]), help='Day to check (default: today, UTC)')
@with_appcontext
def check_limit_cli(register_id, on_date):
    """
    Reconcile a register's day against its cash limit.

    Example:
        flask --app computerstore registers check-limit --register-id 1 --date 2026-10-19
    """
    from .services import cash_limit_service

    try:
        violation = cash_limit_service.check_and_record_cash_limit_violation(register_id, on_date or utcnow())
    except StoreError as e:
        raise click.ClickException(str(e))

    if violation is None:
        click.echo("OK No new violation recorded")
    else:
        click.echo(
            f"WARN Violation recorded: limit {money_str(violation.limit_amount)}, "
            f"actual {money_str(violation.actual_amount)}"
        )


@registers_group.command('violations')
@click.option('--register-id', type=int, help='Filter by cash register ID')
@with_appcontext
def list_violations_cli(register_id):
    """List recorded cash limit violations, newest first."""
    from .services import cash_limit_service

    violations = cash_limit_service.list_violations(register_id)
    if not violations:
        click.echo("No violations recorded.")
        return

    for v in violations:
        click.echo(
            f"  {v.violation_date:%Y-%m-%d %H:%M} register={v.cash_register_id} "
            f"limit={money_str(v.limit_amount)} actual={money_str(v.actual_amount)} "
            f"excess={money_str(v.excess_amount)}"
        )


@click.group('equipment')
def equipment_group():
    """Equipment inventory commands."""


@equipment_group.command('transfer')
@click.option('--equipment-id', type=int, required=True, help='Equipment ID')
@click.option('--store-point-id', type=int, required=True, help='Target store point ID')
@with_appcontext
def transfer_cli(equipment_id, store_point_id):
    """Move a unit onto a store point floor."""
    from .services import inventory_service

    if inventory_service.transfer_equipment_to_store_point(equipment_id, store_point_id):
        click.echo(f"PASS Equipment {equipment_id} moved to store point {store_point_id}")
    else:
        raise click.ClickException(
            f"Equipment {equipment_id} cannot be moved (missing, sold, or unknown store point)"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(orders_group)
    app.cli.add_command(registers_group)
    app.cli.add_command(equipment_group)
