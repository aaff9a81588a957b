# rollodex/database.py
from datetime import date

import click
from flask import current_app
from flask.cli import with_appcontext

from .models import (db, User, Brand, Retailer, Relationship, NotificationPreferences,
                     UserRoleEnum, CompanyTypeEnum, RelationshipStatusEnum)

DEMO_RETAILER_EMAIL = 'admin@freshmarket.example.com'
DEMO_BRAND_EMAIL = 'admin@pureelements.example.com'


def _demo_user(email, first_name, last_name, role, company_name, company_type, password):
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        company_name=company_name,
        company_type=company_type,
        is_active=True,
        email_verified=True,
    )
    user.set_password(password, rounds=current_app.config.get('BCRYPT_ROUNDS', 12))
    db.session.add(user)
    db.session.flush()
    user.notification_preferences = NotificationPreferences()
    return user


def populate_demo_data():
    """
    Inserts a demo retailer, a demo brand account with its brand and an
    active relationship between them. Does nothing when users already exist.
    """
    if User.query.count() > 0:
        current_app.logger.info("Users table already has data. Skipping demo data.")
        return False

    password = current_app.config['DEMO_PASSWORD']
    retailer = _demo_user(DEMO_RETAILER_EMAIL, 'Sarah', 'Johnson', UserRoleEnum.RETAILER_ADMIN,
                          'Fresh Market Co', CompanyTypeEnum.RETAILER, password)
    retailer.retailer_profile = Retailer(name='Fresh Market Co', store_type='Grocery')

    brand_user = _demo_user(DEMO_BRAND_EMAIL, 'Emma', 'Green', UserRoleEnum.BRAND_ADMIN,
                            'Pure Elements', CompanyTypeEnum.BRAND, password)
    brand = Brand(
        name='Pure Elements',
        description='Organic and natural food products',
        industry='Natural Foods',
        website='https://pureelements.com',
        owner_id=brand_user.id,
        is_public=True,
    )
    brand.recompute_completion_score()
    db.session.add(brand)
    db.session.flush()

    relationship = Relationship(
        brand_id=brand.id,
        retailer_id=retailer.id,
        notes='Great partnership, high-quality products',
        created_by=retailer.id,
    )
    relationship.status = RelationshipStatusEnum.ACTIVE
    relationship.started_date = date.today()
    db.session.add(relationship)

    try:
        db.session.commit()
        current_app.logger.info("Demo data inserted successfully.")
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error committing demo data: {e}", exc_info=True)
        raise
    return True


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Creates all tables that do not exist yet."""
    db.create_all()
    click.echo('Database tables initialized.')


@click.command('seed-db')
@with_appcontext
def seed_db_command():
    """Seeds the database with demo accounts, a brand and a relationship."""
    if populate_demo_data():
        click.echo('Database seeded with demo data.')
    else:
        click.echo('Demo data already exists.')


def register_db_commands(app):
    """Registers database-related CLI commands."""
    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_db_command)
