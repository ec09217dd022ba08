"""
Prompt builders for batch segments.

Each segment prompt restates the series or movie context so that
independently generated segments stay consistent.
"""
import math
from typing import List

from .models import ActConfig, CharacterProfile, EpisodeConfig, MovieConfig, SeriesConfig


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def build_continuity_context(characters: List[CharacterProfile]) -> str:
    """'Name (role): description' for each character, joined with '. '."""
    return ". ".join(f"{c.name} ({c.role}): {c.description}" for c in characters)


def build_episode_prompt(
    episode: EpisodeConfig,
    series: SeriesConfig,
    character_context: str,
    is_first: bool,
    is_last: bool,
) -> str:
    parts = [f'{series.genre} TV series: "{series.title}"']
    if series.setting:
        parts.append(f"Setting: {series.setting}")

    parts.append(f'Episode {episode.episode_number}: "{episode.title}"')
    parts.append(episode.synopsis)

    if character_context:
        parts.append(f"Characters: {character_context}")
    if episode.plot_points:
        parts.append(f"Key moments: {', '.join(episode.plot_points)}")

    if is_first:
        parts.append("This is the series premiere - establish the world and characters")
    elif is_last:
        parts.append("This is the season finale - resolve major plot threads")

    if series.overarching_plot:
        parts.append(f"Series arc: {series.overarching_plot}")

    return ". ".join(parts)


def build_act_prompt(
    act: ActConfig,
    movie: MovieConfig,
    character_context: str,
    is_first: bool,
    is_last: bool,
) -> str:
    parts = [f'{movie.genre} film: "{movie.title}"']
    if movie.setting:
        parts.append(f"Setting: {movie.setting}")

    parts.append(f'Act {act.act_number}: "{act.title}"')
    parts.append(act.synopsis)

    if character_context:
        parts.append(f"Characters: {character_context}")
    if act.plot_points:
        parts.append(f"Key moments: {', '.join(act.plot_points)}")

    # Guidance follows position, not the act's own title
    if is_first:
        parts.append("Act 1 - Setup: Establish the world, introduce characters, present the inciting incident")
    elif is_last:
        parts.append("Act 3 - Resolution: Climax and resolution, character arcs complete")
    else:
        parts.append("Act 2 - Confrontation: Rising action, obstacles, character development")

    return ". ".join(parts)


def generate_default_acts(movie: MovieConfig) -> List[ActConfig]:
    """Canonical three-act split at 25% / 50% / 25% of the runtime."""
    minutes = movie.target_duration
    return [
        ActConfig(
            act_number=1,
            title="Setup",
            synopsis=(
                f'Opening of "{movie.title}". {movie.synopsis} '
                "Establish the world and introduce the main characters."
            ),
            duration=round_half_up(minutes * 0.25),
        ),
        ActConfig(
            act_number=2,
            title="Confrontation",
            synopsis=f'Middle section of "{movie.title}". Rising action, challenges, and character development.',
            duration=round_half_up(minutes * 0.5),
        ),
        ActConfig(
            act_number=3,
            title="Resolution",
            synopsis=f'Climax and ending of "{movie.title}". Final confrontation and resolution.',
            duration=round_half_up(minutes * 0.25),
        ),
    ]
