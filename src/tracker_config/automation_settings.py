"""
Sequence Automation Settings

Simple True/False toggles controlling which follow-up prompts open after a
primary stat is recorded. Manual mode turns every prompt off so the operator
records each stat type by hand.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SequenceAutomationFlags:
    """
    Follow-up prompt controls.

    True  = prompt opens automatically after the primary stat
    False = primary stat is recorded with no follow-up
    """

    enabled: bool = True
    prompt_assists: bool = True      # Made FG/3PT -> assist prompt
    prompt_rebounds: bool = True     # Missed shot / last FT miss -> rebound prompt
    prompt_blocks: bool = True       # Block -> blocked shot type prompt
    free_throw_sequence: bool = True  # Foul awarding FTs -> free throw prompt
    free_throw_auto_sequence: bool = False  # Standalone FT count + per-shot prompts
    link_events: bool = True         # Share sequence ids across related events

    @property
    def assists_active(self) -> bool:
        return self.enabled and self.prompt_assists

    @property
    def rebounds_active(self) -> bool:
        return self.enabled and self.prompt_rebounds

    @property
    def blocks_active(self) -> bool:
        return self.enabled and self.prompt_blocks

    @property
    def free_throws_active(self) -> bool:
        return self.enabled and self.free_throw_sequence

    @property
    def free_throw_auto_active(self) -> bool:
        return self.enabled and self.free_throw_auto_sequence


class AutomationPresets:
    """Named flag presets offered to the operator before tracking starts."""

    # All follow-up prompts on (standard tracking)
    DEFAULT = SequenceAutomationFlags()

    # Every prompt off
    MANUAL = SequenceAutomationFlags(
        enabled=False,
        prompt_assists=False,
        prompt_rebounds=False,
        prompt_blocks=False,
        free_throw_sequence=False,
        free_throw_auto_sequence=False,
        link_events=False,
    )

    # Default plus the standalone free throw auto-sequence
    FULL = replace(DEFAULT, free_throw_auto_sequence=True)

    @classmethod
    def by_name(cls, name: str) -> SequenceAutomationFlags:
        """
        Look up a preset by name.

        Args:
            name: "default", "manual" or "full" (case-insensitive)

        Returns:
            Matching flag preset

        Raises:
            ValueError: If name is not a known preset
        """
        presets = {
            "default": cls.DEFAULT,
            "manual": cls.MANUAL,
            "full": cls.FULL,
        }
        key = name.lower()
        if key not in presets:
            raise ValueError(f"Unknown automation preset: {name}. Valid presets: {list(presets)}")
        return presets[key]
