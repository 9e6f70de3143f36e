#!/usr/bin/env python3
import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import get_settings
from config.validators import get_validation_summary
from .catalog.film_catalog import FilmCatalog, get_catalog
from .recommendation.recommender import get_recommender
from .types import (
    Environment,
    FilmFormat,
    FilmType,
    Intent,
    LightCondition,
    WeatherData,
)
from .roll.export import EXPORT_FORMATS, export_roll
from .roll.session import RollSession
from .utils.exceptions import RollPlannerError
from .utils.logger import init_logging
from .weather.client import WeatherService


def _values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


async def _fetch_weather(lat: float, lon: float) -> Optional[WeatherData]:
    async with WeatherService(get_settings().get_weather_config()) as service:
        return await service.fetch_weather(lat, lon)


def _weather_from_args(args) -> Optional[WeatherData]:
    if args.lat is None or args.lon is None:
        return None
    weather = asyncio.run(_fetch_weather(args.lat, args.lon))
    if weather is None:
        print("Weather unavailable, recommending without it.", file=sys.stderr)
    return weather


# =============================================================================
# Commands
# =============================================================================

def cmd_recommend(args) -> int:
    recommender = get_recommender()
    weather = _weather_from_args(args)

    recommendation = recommender.get_recommendation(
        args.light, args.environment, args.intent, weather, args.type, args.format
    )

    discipline = recommender.get_discipline(args.intent)

    if recommendation.is_placeholder:
        guidance, tips = None, None
    else:
        guidance = recommender.get_exposure_guidance(args.light, recommendation.ei, args.environment, weather)
        tips = recommender.get_metering_tips(args.light, args.environment, args.intent, weather)

    if args.json:
        payload = {'recommendation': recommendation.to_dict(), 'discipline': discipline}
        if guidance is not None:
            payload['exposure'] = {'aperture': guidance.aperture, 'shutter': guidance.shutter, 'note': guidance.note}
            payload['metering'] = {'primary': tips.primary, 'secondary': tips.secondary}
        if weather is not None:
            payload['weather'] = weather.to_dict()
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Film: {recommendation.film}")
    print(f"Rate at: EI {recommendation.ei}")
    print(f"Approach: {recommendation.exposure}")
    for adjustment in recommendation.adjustments:
        print(f"  - {adjustment}")
    print(f'"{discipline}"')

    if guidance is not None:
        print()
        print(f"Exposure: {guidance.aperture} @ {guidance.shutter}")
        if guidance.note:
            print(f"  {guidance.note}")
        print(f"Meter: {tips.primary}")
        print(f"  {tips.secondary}")

    if weather is not None:
        print()
        print(f"Weather: {weather.conditions} at {weather.location_name} ({weather.light_quality})")
        print(f"  {weather.shooting_note}")

    return 0


def cmd_guide(args) -> int:
    recommendation = get_recommender().get_guidance_for_film(args.film_key, args.light, film_type=args.type)

    print(f"Film: {recommendation.film} (ISO {recommendation.iso})")
    print(f"Rate at: EI {recommendation.ei}")
    print(f"Approach: {recommendation.exposure}")
    for adjustment in recommendation.adjustments:
        print(f"  - {adjustment}")
    return 0


def cmd_films(args) -> int:
    catalog = get_catalog()
    film_type = FilmType(args.type) if args.type else None
    film_format = FilmFormat(args.format) if args.format else None

    if args.search:
        films = catalog.search(args.search, film_type, film_format)
    else:
        films = catalog.filter(film_type, film_format)

    if not films:
        print("No films match.")
        return 1

    for brand, stocks in FilmCatalog.group_by_brand(films).items():
        print(brand)
        for film in stocks:
            formats = '/'.join(sorted(fmt.value for fmt in film.formats))
            print(f"  {film.key:<24} {film.name:<28} ISO {film.iso:<5} {formats}")
    return 0


def cmd_validate_config(args) -> int:
    settings = get_settings()
    try:
        settings.validate()
    except ValueError as e:
        print(f"Configuration invalid: {e}", file=sys.stderr)
        return 1

    print(get_validation_summary(*settings.get_validated_domains()))
    return 0


def cmd_export(args) -> int:
    try:
        data = json.loads(Path(args.session).read_text())
    except (OSError, ValueError) as e:
        print(f"Cannot read roll session {args.session}: {e}", file=sys.stderr)
        return 1

    session = RollSession.from_dict(data)
    filename, content = export_roll(session, args.format)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / filename).write_text(content)
    print(output_dir / filename)
    return 0


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rollplanner',
        description="Film stock recommendations and exposure guidance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rollplanner recommend --light harsh --environment portrait --intent calm
  rollplanner recommend --light dim --environment street --intent documentary --type bw --json
  rollplanner guide hp5_plus --light dim
  rollplanner films --format 120 --search ilford
  rollplanner export roll.json --format csv
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    recommend = subparsers.add_parser('recommend', help='Recommend a film for the conditions')
    recommend.add_argument('--light', required=True, choices=_values(LightCondition))
    recommend.add_argument('--environment', required=True, choices=_values(Environment))
    recommend.add_argument('--intent', required=True, choices=_values(Intent))
    recommend.add_argument('--type', default=FilmType.COLOR.value, choices=_values(FilmType))
    recommend.add_argument('--format', default=FilmFormat.SMALL.value, choices=_values(FilmFormat))
    recommend.add_argument('--lat', type=float, help='Latitude for live weather')
    recommend.add_argument('--lon', type=float, help='Longitude for live weather')
    recommend.add_argument('--json', action='store_true', help='Print JSON instead of text')
    recommend.set_defaults(func=cmd_recommend)

    guide = subparsers.add_parser('guide', help='Guidance for a film you already have')
    guide.add_argument('film_key')
    guide.add_argument('--light', choices=_values(LightCondition))
    guide.add_argument('--type', choices=_values(FilmType))
    guide.set_defaults(func=cmd_guide)

    films = subparsers.add_parser('films', help='List the film catalog')
    films.add_argument('--type', choices=_values(FilmType))
    films.add_argument('--format', choices=_values(FilmFormat))
    films.add_argument('--search', help='Match name, brand or key')
    films.set_defaults(func=cmd_films)

    validate = subparsers.add_parser('validate-config', help='Validate every configuration domain')
    validate.set_defaults(func=cmd_validate_config)

    export = subparsers.add_parser('export', help='Export a stored roll session')
    export.add_argument('session', help='Roll session JSON (RollSession.to_dict)')
    export.add_argument('--format', default='json', choices=list(EXPORT_FORMATS))
    export.add_argument('--output-dir', default='.')
    export.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    init_logging()

    try:
        return args.func(args)
    except RollPlannerError as e:
        print(f"Error [{e.error_code}]: {e.message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
