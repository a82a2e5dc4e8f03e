#!/usr/bin/env python3

"""
Main entry point for the Amazon store command-line interface.

Usage:
    python main_store.py <dbname> <port> <user>

The menu logic is located in the `user_interface.menu` module.
"""

import sys
import os

# Ensure the project root is in the Python path
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from user_interface.menu import main as store_menu_main

if __name__ == '__main__':
    sys.exit(store_menu_main())
