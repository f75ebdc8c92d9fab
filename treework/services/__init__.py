"""Services for treework."""
