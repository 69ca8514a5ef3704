"""
Command-Line Interface for Playlist DNA
=======================================

Usage:
    python -m playlist_dna.cli <command> [options]

Commands:
    analyze      Audio DNA, personality, genres and health of one playlist
    battle       Compare two playlists
    seeds        Build recommendation seeds with a strategy (and fetch tracks online)
    strategies   List the available seed strategies

Options:
    --from-json     Read playlist snapshots from JSON files instead of Spotify
    --format        Output format: json or simple (default: json)
    --output, -o    Output file path (default: stdout)
    --verbose, -v   Verbose output with progress details

Examples:
    python -m playlist_dna.cli analyze https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M
    python -m playlist_dna.cli battle spotify:playlist:aaa spotify:playlist:bbb --format simple
    python -m playlist_dna.cli analyze snapshot.json --from-json
    python -m playlist_dna.cli seeds mood_safe --playlist <playlist_id>
"""

import argparse
import json
import os
import sys
from typing import List, Optional, Tuple

from spotipy.exceptions import SpotifyException

from .errors import PlaylistDnaError
from .explainer import ExplanationGenerator
from .seeds import STRATEGIES, SignalBundle, list_strategies, select_seeds
from .service import PlaylistService, RecommendationOutput
from .snapshot import PlaylistSnapshot, battle_snapshots


def _add_output_options(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--format',
        type=str,
        choices=['json', 'simple'],
        default='json',
        help='Output format (default: json)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output file path (default: print to stdout)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='playlist_dna',
        description='🧬 Playlist DNA - Playlist analysis, battles and recommendation seeds',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s analyze https://open.spotify.com/playlist/xxxxx
  %(prog)s battle spotify:playlist:xxxxx spotify:playlist:yyyyy
  %(prog)s analyze mix.json --from-json --format simple
  %(prog)s seeds deep_cuts

Environment Variables:
  SPOTIFY_CLIENT_ID      Your Spotify API client ID
  SPOTIFY_CLIENT_SECRET  Your Spotify API client secret
  SPOTIFY_REDIRECT_URI   Redirect URI for the listening-history strategies
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    analyze = subparsers.add_parser('analyze', help='Analyze one playlist')
    analyze.add_argument('playlist', type=str, help='Spotify playlist URL, URI, or ID (or snapshot path)')
    analyze.add_argument('--from-json', action='store_true', help='Treat the playlist argument as a snapshot file')
    analyze.add_argument('--save-snapshot', type=str, default=None,
                         help='Also save the fetched playlist to this JSON file')
    _add_output_options(analyze)

    battle = subparsers.add_parser('battle', help='Battle two playlists')
    battle.add_argument('playlist1', type=str, help='First playlist URL, URI, or ID (or snapshot path)')
    battle.add_argument('playlist2', type=str, help='Second playlist URL, URI, or ID (or snapshot path)')
    battle.add_argument('--from-json', action='store_true', help='Treat both arguments as snapshot files')
    _add_output_options(battle)

    seeds = subparsers.add_parser('seeds', help='Build recommendation seeds')
    seeds.add_argument('strategy', type=str, nargs='?', default=None,
                       help=f"Strategy id ({', '.join(STRATEGIES)}); omit for explicit seeds")
    seeds.add_argument('--playlist', type=str, default=None,
                       help='Playlist to draw seeds from (snapshot path with --from-json)')
    seeds.add_argument('--from-json', action='store_true',
                       help='Read --playlist from a snapshot file and only print the seeds')
    seeds.add_argument('--seed-tracks', type=str, nargs='*', default=None, help='Explicit seed track ids')
    seeds.add_argument('--seed-artists', type=str, nargs='*', default=None, help='Explicit seed artist ids')
    seeds.add_argument('--seed-genres', type=str, nargs='*', default=None, help='Explicit seed genres')
    seeds.add_argument('--no-history', action='store_true',
                       help='Skip the listening history (no user authorization needed)')
    _add_output_options(seeds)

    strategies = subparsers.add_parser('strategies', help='List seed strategies')
    _add_output_options(strategies)

    return parser


# =============================================================================
# FORMATTING
# =============================================================================
def format_analysis(result, fmt: str, snapshot: Optional[PlaylistSnapshot] = None) -> str:
    if fmt == 'json':
        data = result.to_dict()
        if snapshot is not None:
            data = {"playlist": snapshot.metadata(), **data}
        return json.dumps(data, indent=2)

    explanation = ExplanationGenerator().explain_analysis(result)
    dna = result.audio_dna
    lines = []
    if snapshot is not None:
        lines.append(f"🎵 {snapshot.name} by {snapshot.owner}")
    lines.extend([
        f"🧬 {explanation.summary}",
        "",
        f"   Energy {dna.energy} | Danceability {dna.danceability} | Valence {dna.valence}",
        f"   Acousticness {dna.acousticness} | Instrumentalness {dna.instrumentalness} | Tempo {dna.tempo}",
        "",
        "Genres:",
    ])
    for share in result.genre_distribution:
        lines.append(f"   {share.name:<24} {share.percent:3}%")
    if result.subgenres:
        lines.append(f"   Also: {', '.join(result.subgenres)}")
    lines.extend([
        "",
        f"❤️  {explanation.details['health']}",
        f"🎚️  {explanation.details['audio']}",
        "",
        f"Top tracks ({result.track_count} total):",
    ])
    for i, track in enumerate(result.top_tracks, 1):
        lines.append(f"{i:2}. {track['name']} - {track['artist']}")
    return '\n'.join(lines)


def format_battle(result, fmt: str, snapshots: Optional[Tuple[PlaylistSnapshot, PlaylistSnapshot]] = None) -> str:
    if fmt == 'json':
        data = result.to_dict()
        if snapshots is not None:
            data = {"playlist1": snapshots[0].metadata(), "playlist2": snapshots[1].metadata(), **data}
        return json.dumps(data, indent=2)

    explanation = ExplanationGenerator().explain_battle(result)
    lines = []
    if snapshots is not None:
        lines.append(f"🎵 {snapshots[0].name} vs {snapshots[1].name}")
    lines.extend([
        f"⚔️  {explanation.summary}",
        f"   Scores: {result.playlist1_score} vs {result.playlist2_score}",
        f"   {explanation.details['compatibility']}",
        f"   {explanation.details['differences']}",
        f"   {explanation.details['shared']}",
    ])
    if result.shared_tracks:
        lines.append("")
        lines.append("Shared tracks:")
        for track in result.shared_tracks:
            lines.append(f"   {track.title} - {track.artist}")
    if result.shared_artists:
        lines.append(f"Shared artists: {', '.join(result.shared_artists)}")
    if result.shared_genres:
        lines.append(f"Shared genres: {', '.join(result.shared_genres)}")
    return '\n'.join(lines)


def format_recommendations(result: RecommendationOutput, fmt: str) -> str:
    if fmt == 'json':
        return json.dumps(result.to_dict(), indent=2)

    lines = [format_seeds(result.spec, fmt), "", f"Recommendations ({len(result.tracks)}):", "-" * 50]
    for i, track in enumerate(result.to_dict()['tracks'], 1):
        lines.append(f"{i:2}. {track['name']} - {', '.join(track['artists'])}")
        lines.append(f"    Track ID: {track['id']}")
    return '\n'.join(lines)


def format_seeds(spec, fmt: str) -> str:
    if fmt == 'json':
        return spec.to_json(indent=2)

    lines = [f"🌱 Seeds ({spec.strategy or 'explicit'})"]
    if spec.seed_tracks:
        lines.append(f"   Tracks:  {', '.join(spec.seed_tracks)}")
    if spec.seed_artists:
        lines.append(f"   Artists: {', '.join(spec.seed_artists)}")
    if spec.seed_genres:
        lines.append(f"   Genres:  {', '.join(spec.seed_genres)}")
    for key, value in spec.target_ranges.items():
        lines.append(f"   {key} = {value:g}")
    if spec.post_filter:
        lines.append(f"   Filter:  {spec.post_filter.description}")
    return '\n'.join(lines)


def format_strategies(fmt: str) -> str:
    strategies = list_strategies()
    if fmt == 'json':
        return json.dumps(strategies, indent=2)
    return '\n'.join(f"{s['id']:<24} {s['name']}: {s['description']}" for s in strategies)


def validate_environment() -> bool:
    """Check if required environment variables are set."""
    client_id = os.environ.get('SPOTIFY_CLIENT_ID')
    client_secret = os.environ.get('SPOTIFY_CLIENT_SECRET')

    if not client_id or not client_secret:
        print("❌ Error: Spotify API credentials not found!", file=sys.stderr)
        print("", file=sys.stderr)
        print("Please set the following environment variables:", file=sys.stderr)
        print("  SPOTIFY_CLIENT_ID=your_client_id", file=sys.stderr)
        print("  SPOTIFY_CLIENT_SECRET=your_client_secret", file=sys.stderr)
        print("", file=sys.stderr)
        print("Get credentials at: https://developer.spotify.com/dashboard", file=sys.stderr)
        return False

    return True


def _needs_spotify(args) -> bool:
    return args.command != 'strategies' and not args.from_json


def _build_service(args) -> PlaylistService:
    from .spotify_client import SpotifyClient

    user_auth = args.command == 'seeds' and not args.no_history
    return PlaylistService(spotify_client=SpotifyClient(user_auth=user_auth), verbose=args.verbose)


def run(args) -> str:
    """Execute a parsed command and return the formatted output."""
    if args.command == 'strategies':
        return format_strategies(args.format)

    if args.command == 'analyze':
        if args.from_json:
            snapshot = PlaylistSnapshot.load(args.playlist)
        else:
            service = _build_service(args)
            snapshot = service.fetch(args.playlist)
            if args.save_snapshot:
                snapshot.save(args.save_snapshot)
                if args.verbose:
                    print(f"💾 Snapshot saved to: {args.save_snapshot}")
        return format_analysis(snapshot.analyze(), args.format, snapshot)

    if args.command == 'battle':
        if args.from_json:
            first, second = PlaylistSnapshot.load(args.playlist1), PlaylistSnapshot.load(args.playlist2)
            result = battle_snapshots(first, second)
        else:
            service = _build_service(args)
            first, second = service.fetch(args.playlist1), service.fetch(args.playlist2)
            result = service.compare(first, second)
        return format_battle(result, args.format, (first, second))

    # seeds
    explicit = dict(seed_tracks=args.seed_tracks, seed_artists=args.seed_artists, seed_genres=args.seed_genres)
    if args.from_json:
        if args.playlist:
            signal = PlaylistSnapshot.load(args.playlist).to_signal_bundle(**explicit)
        else:
            signal = SignalBundle(**explicit)
        return format_seeds(select_seeds(args.strategy, signal), args.format)

    result = _build_service(args).recommend(
        args.strategy,
        playlist_input=args.playlist,
        include_history=not args.no_history,
        **explicit
    )
    return format_recommendations(result, args.format)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if _needs_spotify(args) and not validate_environment():
        return 1

    try:
        output = run(args)
    except (PlaylistDnaError, SpotifyException, OSError) as e:
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(output)
        print(f"✅ Output saved to: {args.output}")
    else:
        print(output)

    return 0


if __name__ == '__main__':
    sys.exit(main())
