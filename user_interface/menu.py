# -*- coding: utf-8 -*-
"""
================================================================================
Amazon Store Command-Line Interface
================================================================================
Purpose:
----------------
Interactive, menu-driven front end for the store database. It reads a numeric
choice, prompts for whatever the chosen operation needs, calls the business
logic and prints the result.

All I/O lives here so the business logic modules stay testable. Recoverable
errors (`StoreAppError`) are printed and the menu is shown again; only a
failure to connect to the database at startup ends the program.

Usage:
    python main_store.py <dbname> <port> <user> [--host HOST] [--password PASSWORD]
----------------
"""

# =====================================================================================
# --- Imports ---
# =====================================================================================
import sys
import logging
import argparse

from common.errors import StoreAppError
from common.utils import load_settings, setup_logging, LOG_DIR
from database.db_utils import get_db_connection
from database.gateway import DataGateway
from inventory.db_utils import list_products, get_managed_store_ids, update_product, place_supply_request
from order_management.order_numbers import build_allocator
from order_management.workflow import place_order, get_recent_orders, parse_positive_int
from reports.analytics import get_recent_product_updates, get_popular_products, get_popular_customers
from stores.locator import nearby_stores
from users.accounts import create_user, log_in, require_manager

logger = logging.getLogger(__name__)

SEPARATOR = "---------"
LOG_OUT = 20


# =====================================================================================
# --- Input Helpers ---
# =====================================================================================

def prompt(label):
    return input(label).strip()


def read_choice():
    """Reads the user's menu choice, asking again until an integer is given."""
    while True:
        try:
            return int(input("Please make your choice: "))
        except ValueError:
            print("Your input is invalid!")


def read_store_id(label="Enter store ID: "):
    return parse_positive_int("store ID", prompt(label))


def greeting():
    print(
        "\n\n*******************************************************\n"
        "              User Interface                           \n"
        "*******************************************************\n"
    )


# =====================================================================================
# --- Menu Actions ---
# =====================================================================================

def do_create_user(gateway):
    name = prompt("\tEnter name: ")
    password = prompt("\tEnter password: ")
    latitude = prompt("\tEnter latitude: ")
    longitude = prompt("\tEnter longitude: ")
    create_user(gateway, name, password, latitude, longitude)
    print("User successfully created!")


def do_log_in(gateway):
    name = prompt("\tEnter name: ")
    password = prompt("\tEnter password: ")
    session = log_in(gateway, name, password)
    if session is None:
        print("Invalid name or password.")
    return session


def do_view_stores(gateway, session, radius):
    stores = nearby_stores(gateway, session.user_id, radius)
    print(f"List of stores within {radius:g} miles of you")
    print(SEPARATOR)
    if not stores:
        print("No stores found nearby.")
    for store in stores:
        print(f"Store ID: {store.store_id}")
        print(f"Distance: {store.distance} miles")
        print(SEPARATOR)


def do_view_products(gateway):
    store_id = read_store_id()
    products = list_products(gateway, store_id)
    print(f"List of items in Store {store_id}")
    print(SEPARATOR)
    for product in products:
        print(f"Item: {product.product_name}")
        print(f"Units available: {product.number_of_units}")
        print(f"Price: {product.price_per_unit}")
        print(SEPARATOR)


def do_place_order(gateway, allocator, session, radius):
    store_id = read_store_id("Enter Store ID: ")
    product_name = prompt("Enter product name: ")
    quantity = prompt("Enter amount of units to purchase: ")
    receipt = place_order(
        gateway, allocator, session.user_id, store_id, product_name, quantity,
        max_distance=radius
    )
    print("Order placed!")
    print(f"Order number: {receipt.order_number}")
    print(f"Store ID: {receipt.store_id}")
    print(f"Product: {receipt.product_name}")
    print(f"Units ordered: {receipt.units_ordered}")
    print(f"Order time: {receipt.order_time:%Y-%m-%d %H:%M:%S}")


def do_view_recent_orders(gateway, session):
    orders = get_recent_orders(gateway, session.user_id)
    print("\nRecent Orders")
    print(SEPARATOR)
    for order in orders:
        print(f"Store ID: {order.store_id}")
        print(f"Product name: {order.product_name}")
        print(f"Units ordered: {order.units_ordered}")
        print(f"Date ordered: {order.order_time}")
        print(SEPARATOR)
    print()


def print_managed_stores(gateway, session):
    store_ids = get_managed_store_ids(gateway, session.user_id)
    if not store_ids:
        print("You do not manage any stores.")
        return False
    print("Here are the stores you manage: ")
    print(SEPARATOR)
    for store_id in store_ids:
        print(f"Store ID: {store_id}")
    print(SEPARATOR + "\n")
    return True


def do_update_product(gateway, session):
    require_manager(session)
    if not print_managed_stores(gateway, session):
        return
    store_id = read_store_id()
    product_name = prompt("Enter product name: ")
    units = prompt("Enter new number of units: ")
    price = prompt("Enter new price per unit: ")
    update_product(gateway, session, store_id, product_name, units, price)
    print("Product updated!")


def do_view_recent_updates(gateway, session):
    updates = get_recent_product_updates(gateway, session)
    print("\nRecent Product Updates")
    print(SEPARATOR)
    for update in updates:
        print(f"Update number: {update.update_number}")
        print(f"Store ID: {update.store_id}")
        print(f"Product name: {update.product_name}")
        print(f"Updated on: {update.updated_on}")
        print(SEPARATOR)
    print()


def do_view_popular_products(gateway, session):
    products = get_popular_products(gateway, session)
    print("\nMost popular products at your stores")
    print(SEPARATOR)
    for product in products:
        print(f"Product name: {product.product_name}")
        print(f"Order count: {product.order_count}")
        print(SEPARATOR)
    print()


def do_view_popular_customers(gateway, session):
    if not session.is_manager:
        print("Invalid permissions.\n")
        return
    if not print_managed_stores(gateway, session):
        return
    store_id = read_store_id("Enter store ID to view popular customers: ")
    customers = get_popular_customers(gateway, session, store_id)
    print(f"\nMost popular customers at Store {store_id}")
    print(SEPARATOR)
    for customer in customers:
        print(f"Customer ID: {customer.customer_id}")
        print(f"Name: {customer.name}")
        print(f"Order count: {customer.order_count}")
        print(SEPARATOR)
    print()


def do_place_supply_request(gateway, session):
    require_manager(session)
    if not print_managed_stores(gateway, session):
        return
    store_id = read_store_id()
    product_name = prompt("Enter product name: ")
    units = prompt("Enter number of units needed: ")
    warehouse_id = parse_positive_int("warehouse ID", prompt("Enter warehouse ID: "))
    request_number = place_supply_request(gateway, session, store_id, warehouse_id, product_name, units)
    print(f"Supply request {request_number} placed!")


def run_action(action, *args, label=None):
    """Runs one menu action, reporting recoverable errors instead of exiting."""
    try:
        return action(*args)
    except StoreAppError as e:
        logger.warning("%s failed: %s", label or action.__name__, e)
        print(f"ERROR: {e}")
        return None


# =====================================================================================
# --- Menus ---
# =====================================================================================

def user_menu(gateway, allocator, session, radius):
    """Shows the logged in menu until the user logs out."""
    actions = {
        1: lambda: do_view_stores(gateway, session, radius),
        2: lambda: do_view_products(gateway),
        3: lambda: do_place_order(gateway, allocator, session, radius),
        4: lambda: do_view_recent_orders(gateway, session),
        5: lambda: do_update_product(gateway, session),
        6: lambda: do_view_recent_updates(gateway, session),
        7: lambda: do_view_popular_products(gateway, session),
        8: lambda: do_view_popular_customers(gateway, session),
        9: lambda: do_place_supply_request(gateway, session),
    }
    while True:
        print("MAIN MENU")
        print(SEPARATOR)
        print(f"1. View Stores within {radius:g} miles")
        print("2. View Product List")
        print("3. Place a Order")
        print("4. View 5 recent orders")

        # the following functionalities are for managers
        print("5. Update Product")
        print("6. View 5 recent Product Updates Info")
        print("7. View 5 Popular Items")
        print("8. View 5 Popular Customers")
        print("9. Place Product Supply Request to Warehouse")

        print(".........................")
        print(f"{LOG_OUT}. Log out")

        choice = read_choice()
        if choice == LOG_OUT:
            logger.info("User %s logged out.", session.user_id)
            return
        action = actions.get(choice)
        if action is None:
            print("Unrecognized choice!")
            continue
        run_action(action, label=f"Menu option {choice}")


def main_menu(gateway, allocator, radius):
    """Shows the top level menu until the user exits."""
    while True:
        print("MAIN MENU")
        print(SEPARATOR)
        print("1. Create user")
        print("2. Log in")
        print("9. < EXIT")
        choice = read_choice()
        if choice == 1:
            run_action(do_create_user, gateway)
        elif choice == 2:
            session = run_action(do_log_in, gateway)
            if session is not None:
                user_menu(gateway, allocator, session, radius)
        elif choice == 9:
            return
        else:
            print("Unrecognized choice!")


# =====================================================================================
# --- Entry Point ---
# =====================================================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Amazon store command-line interface.")
    parser.add_argument("dbname", help="Name of the PostgreSQL database.")
    parser.add_argument("port", help="Port the PostgreSQL server listens on.")
    parser.add_argument("user", help="Database user name.")
    parser.add_argument("--host", default=None, help="Database host (default: POSTGRES_HOST or localhost).")
    parser.add_argument("--password", default=None, help="Database password (default: blank).")
    parser.add_argument("--log-dir", default=LOG_DIR, help="Directory for log files.")
    return parser.parse_args(argv)


def main(argv=None):
    """
    Connects to the database and runs the menu until the user exits.

    Returns:
        int: The process exit status.
    """
    args = parse_args(argv)
    setup_logging(args.log_dir)
    settings = load_settings({
        'POSTGRES_DB': args.dbname,
        'POSTGRES_PORT': args.port,
        'POSTGRES_USER': args.user,
        'POSTGRES_HOST': args.host,
        'POSTGRES_PASSWORD': args.password,
    })

    greeting()
    conn = get_db_connection(settings)
    if conn is None:
        logger.critical("Cannot proceed without a database connection.")
        return 1

    gateway = DataGateway(conn)
    allocator = build_allocator(gateway, settings)
    radius = float(settings['STORE_RADIUS_MILES'])
    try:
        main_menu(gateway, allocator, radius)
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted by user. Exiting.")
    finally:
        print("Disconnecting from database...")
        gateway.cleanup()
        print("Done\n\nBye !")
    return 0


if __name__ == '__main__':
    sys.exit(main())
