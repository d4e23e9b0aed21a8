"""Protocol services for accounts, characters and inventories."""
