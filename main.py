import sys

# --- Settings/Logging ---
from league_manager.logging.setup import setup_logging
from league_manager.config.settings import settings

setup_logging()

from loguru import logger

# --- End Settings/Logging ---

from league_manager.league.manager import LeagueManager
from league_manager.storage.json_store import LeagueStore, StorageError


def main() -> None:
    """Loads the saved league and logs its current standings."""
    logger.info(f"Starting League Manager with data file {settings.storage_path}")

    store = LeagueStore()
    manager = LeagueManager.from_store(store)

    standings = manager.standings()
    played = sum(1 for result in manager.matches.values() if result.is_complete)
    logger.info(f"{len(standings)} teams, {played} completed matches.")
    for row in standings:
        logger.info(
            f"{row.rank:>2}. {row.name:<16} P{row.played} W{row.won} D{row.drawn} L{row.lost} "
            f"GF{row.gf} GA{row.ga} GD{row.gd:+d} Pts{row.points}"
        )

    # Writes the defaults on first run so the file exists for the next session
    store.save(manager.state)


if __name__ == "__main__":
    try:
        main()
    except StorageError as e:
        logger.error(f"Could not save league data: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
