"""tsmend core: preprocessing, indexing, and import/export repair passes."""
