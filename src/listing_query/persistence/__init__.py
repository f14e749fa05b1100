"""Backend adapters. Import the backend subpackage you need."""
