"""Startup backfill of the processed-event ledger."""

from ton_tracker.services.backfill.seeder import BackfillSeeder, SeedResult

__all__ = ["BackfillSeeder", "SeedResult"]
