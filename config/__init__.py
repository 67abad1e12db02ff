"""Static data shipped with the picker (sample catalogs)."""
