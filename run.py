import pygame, sys, argparse, time
from sim.synthetic import SyntheticSource
from sim.scenarios import SCENARIOS
import config
from skyping.audio import MixerClipPlayer, SpeechPlayer, attach_alert, clip_map
from skyping.detection import DetectionEngine
from skyping.errors import PlaybackFailure
from skyping.geodesy import DirectionPhraser
from skyping.io import replay_source
from skyping.location import FixedLocation
from skyping.models import GeoPoint, SectorPolicy, TrackingMode
from skyping.narration import NarrationQueue
from skyping.opensky import OpenSkySource
from skyping.poller import ThreadedPoller
from skyping.recorder import CsvRecorder
from skyping.tracking import TrackingLoop
from viz.pygame_app import open_window, render


def build_player(clip_dir):
    """Clip files through pygame.mixer if given, else spoken words through pyttsx3."""
    if clip_dir:
        try:
            return MixerClipPlayer(), clip_map(clip_dir)
        except PlaybackFailure as e:
            print("Clip playback unavailable, falling back to speech:", e)
    return SpeechPlayer(), config.speech_clips()


def main():
    parser = argparse.ArgumentParser(description="Point at, and announce, the nearest plane overhead.")
    parser.add_argument("--lat", type=float, default=None, help="your latitude (deg)")
    parser.add_argument("--lon", type=float, default=None, help="your longitude (deg)")
    parser.add_argument(
        "--mode", "-m",
        choices=("live", "synthetic", "off"),
        default="off",
        help="start tracking immediately in this mode",
    )
    parser.add_argument(
        "--scenario", "-s",
        help="scripted scenario key (1/2/3) used as the synthetic source",
        default=None,
    )
    parser.add_argument("--replay", "-i", default=None, help="CSV of recorded sightings used as the synthetic source")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random synthetic sky")
    parser.add_argument("--clips", default=None, help="folder of token clips (North.ogg, between.ogg, ...)")
    parser.add_argument("--policy", choices=("compound", "named"), default=config.NARRATION_POLICY)
    parser.add_argument("--radius-km", type=float, default=config.NOTIFICATION_RADIUS_KM)
    parser.add_argument("--min-alt-ft", type=float, default=config.MINIMUM_ALTITUDE_FT)
    parser.add_argument("--log", default=None, help="write a CSV trace of every poll to this path")
    args = parser.parse_args()

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon go together")
    user = GeoPoint(args.lat, args.lon) if args.lat is not None else None

    # ---- Synthetic source: replay file, scripted scenario, or random sky ----
    if args.replay:
        try:
            synthetic = replay_source(args.replay)
        except (OSError, KeyError, ValueError, RuntimeError) as e:
            print("Failed to load replay CSV:", e)
            synthetic = SyntheticSource(seed=args.seed)
    elif args.scenario:
        synthetic = SCENARIOS.get(args.scenario, SCENARIOS["1"])()
    else:
        synthetic = SyntheticSource(seed=args.seed)

    screen, font = open_window()
    clock = pygame.time.Clock()

    player, clips = build_player(args.clips)
    policy = SectorPolicy.NAMED if args.policy == "named" else SectorPolicy.COMPOUND
    narrator = NarrationQueue(player, clips, DirectionPhraser(policy))

    loop = TrackingLoop(
        engine=DetectionEngine(args.radius_km, args.min_alt_ft),
        narrator=narrator,
        sources={TrackingMode.LIVE: OpenSkySource(), TrackingMode.SYNTHETIC: synthetic},
        locator=FixedLocation(user),
        poller=ThreadedPoller(),
        recorder=CsvRecorder(args.log) if args.log else None,
    )

    alert = clips.get(config.ALERT_CLIP)
    detach_alert = attach_alert(loop.bus, player, alert) if alert else None

    if args.mode == "live":
        loop.start(TrackingMode.LIVE, time.monotonic())
    elif args.mode == "synthetic":
        loop.start(TrackingMode.SYNTHETIC, time.monotonic())

    running = True
    while running:
        clock.tick(config.FPS)
        now = time.monotonic()

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False

                elif e.key == pygame.K_l:
                    loop.start(TrackingMode.LIVE, now)

                elif e.key == pygame.K_s:
                    loop.start(TrackingMode.SYNTHETIC, now)

                elif e.key in (pygame.K_1, pygame.K_2, pygame.K_3):
                    key = pygame.key.name(e.key)
                    loop.stop()
                    loop.sources[TrackingMode.SYNTHETIC] = SCENARIOS[key]()
                    loop.start(TrackingMode.SYNTHETIC, now)

                elif e.key == pygame.K_x:
                    loop.stop()

                elif e.key == pygame.K_SPACE:
                    loop.narrate()

        loop.tick(now)
        player.pump()

        src = loop.source
        render(screen, font, loop, getattr(src, "name", "") if src is not None else "")
        pygame.display.flip()

    if detach_alert:
        detach_alert()
    loop.close()
    player.close()
    pygame.quit()
    sys.exit(0)


if __name__ == "__main__":
    main()
