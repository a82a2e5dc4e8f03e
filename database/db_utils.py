import os
import sys
import logging
import argparse
import psycopg2

# --- Project Path Setup ---
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from common.utils import load_settings

logger = logging.getLogger(__name__)


def get_db_connection(settings=None):
    """
    Establishes and returns a connection to the PostgreSQL database.

    Args:
        settings (dict, optional): Output of `load_settings()`. Loaded from the
            environment when omitted.

    Returns:
        A psycopg2 connection, or None if the server could not be reached.
    """
    settings = settings or load_settings()
    print(f"Connecting to database {settings['POSTGRES_DB']} on "
          f"{settings['POSTGRES_HOST']}:{settings['POSTGRES_PORT']}...")
    try:
        conn = psycopg2.connect(
            dbname=settings['POSTGRES_DB'],
            user=settings['POSTGRES_USER'],
            password=settings['POSTGRES_PASSWORD'],
            host=settings['POSTGRES_HOST'],
            port=settings['POSTGRES_PORT']
        )
        print("Done")
        return conn
    except psycopg2.OperationalError as e:
        logger.error("Unable to connect to database: %s", e)
        print(f"""Error: Could not connect to the database. Make sure you started postgres on this machine.
Details: {e}""", file=sys.stderr)
        return None


def initialize_database(settings=None):
    """
    Initializes the database by executing the DDL statements in 'schema.sql'.
    """
    conn = None
    schema_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schema.sql')
    try:
        print(f"INFO: Reading database schema from {schema_path}...")
        with open(schema_path, 'r') as f:
            schema_sql = f.read()
        conn = get_db_connection(settings)
        if conn is None:
            return False
        with conn.cursor() as cur:
            print("INFO: Executing schema.sql to initialize database...")
            cur.execute(schema_sql)
            conn.commit()
            print("SUCCESS: Database initialized successfully.")
        return True
    except FileNotFoundError:
        print(f"ERROR: schema.sql not found at {schema_path}")
        return False
    except psycopg2.Error as e:
        print(f"ERROR: An error occurred during database initialization: {e}")
        if conn:
            conn.rollback()
        return False
    finally:
        if conn:
            conn.close()


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Database utility script.")
    parser.add_argument('--init', action='store_true', help='Initialize the database schema without prompting for confirmation.')
    args = parser.parse_args()

    if args.init:
        print("--- Database Initializer (non-interactive) ---")
        initialize_database()
    else:
        print("--- Database Initializer ---")
        print("WARNING: This script is destructive and will drop all existing tables.")
        confirm = input("Are you sure you want to drop all existing tables and re-initialize the database? (yes/no): ")
        if confirm.lower() == 'yes':
            initialize_database()
        else:
            print("INFO: Database initialization cancelled.")
    print("--- Finished ---")
