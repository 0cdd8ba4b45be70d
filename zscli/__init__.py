"""zscli: output formatting for cloud platform inventories."""
