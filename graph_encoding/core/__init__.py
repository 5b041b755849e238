"""Core services shared by the encoding pipeline: errors, logging and configuration."""
