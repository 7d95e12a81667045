"""Wire the stores, feed client, services and game loop together."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import Settings, settings as default_settings
from .game_loop import GameLoop
from .live import FeedClient, LoggingLiveSession, SHLFeedClient
from .logging import logger
from .notifications import ApnsTransport, LoggingTransport, NotificationTransport, Notifier
from .persistence import JsonFileStore
from .services.events import EventService, event_log_adapter
from .services.game_stats import GameStatsService, game_stats_adapter
from .services.players import PlayerService, player_stats_adapter
from .services.season import SeasonService, games_adapter
from .services.standings import StandingService, standings_adapter
from .services.users import UserService, users_adapter


@dataclass
class App:
    season: SeasonService
    standings: StandingService
    game_stats: GameStatsService
    events: EventService
    users: UserService
    players: PlayerService
    notifier: Notifier
    loop: GameLoop


def build_transport(config: Settings) -> NotificationTransport:
    push = config.push_config
    if push.apn_key_path and push.apn_key_id and push.apn_team_id:
        return ApnsTransport(
            key_path=push.apn_key_path,
            key_id=push.apn_key_id,
            team_id=push.apn_team_id,
            production=push.production,
        )
    logger.warning("apns_not_configured", message="push notifications will only be logged")
    return LoggingTransport()


def build_app(
    config: Settings | None = None,
    client: FeedClient | None = None,
    transport: NotificationTransport | None = None,
    storage_dir: Path | None = None,
) -> App:
    config = config or default_settings
    client = client or SHLFeedClient()
    transport = transport or build_transport(config)
    storage_dir = storage_dir or config.storage_dir
    season = config.season

    game_stats = GameStatsService(client, JsonFileStore(storage_dir, "game_stats", game_stats_adapter, {}))
    season_service = SeasonService(
        season,
        client,
        JsonFileStore(storage_dir, f"season_{season}", games_adapter, []),
        game_stats.get_from_cache,
    )
    standings = StandingService(
        season,
        client,
        JsonFileStore(storage_dir, f"standings_{season}", standings_adapter, None),
    )
    events = EventService(JsonFileStore(storage_dir, "events", event_log_adapter, {}))
    users = UserService(JsonFileStore(storage_dir, "users", users_adapter, []))
    players = PlayerService(
        JsonFileStore(storage_dir, f"players_{season}", player_stats_adapter, []),
        season_service.get_decorated,
        game_stats.get_from_cache,
    )
    push = config.push_config
    notifier = Notifier(
        transport,
        topic=push.apn_topic,
        muted=push.mute,
        sound=push.sound,
        expiry_seconds=push.expiry_seconds,
    )
    loop = GameLoop(
        season_service,
        standings,
        game_stats,
        events,
        users,
        players,
        notifier,
        session=LoggingLiveSession(),
        loop_config=config.loop_config,
    )
    return App(
        season=season_service,
        standings=standings,
        game_stats=game_stats,
        events=events,
        users=users,
        players=players,
        notifier=notifier,
        loop=loop,
    )
