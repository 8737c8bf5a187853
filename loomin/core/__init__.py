"""Core services: configuration, logging, exceptions and input hardening."""
