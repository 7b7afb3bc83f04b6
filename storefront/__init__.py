"""Demo storefront: catalog, cart and checkout against a spreadsheet webhook."""
