from __future__ import annotations

from .config import PartSpec, SynthesisRequest

MELODY = """
                                  G4 ~  |
| C5 ~  C5 D5 C5 B4 | A4 ~  F4 ~  A4 ~  |
| D5 ~  D5 E5 D5 C5 | B4 ~  G4 ~  B4 ~  |
| E5 ~  E5 F5 E5 D5 | C5 ~  A4 ~  G4 G4 |
| A4 ~  D5 ~  B4 ~  | C5 ~  ~  ~  ~  ~  |
"""

HARMONY = """
                                  G1 ~  |
| C3 ~  ~  ~  ~  ~  | F3 ~  ~  ~  ~  ~  |
| G3 ~  F#3~  G3 ~  | E3 ~  ~  ~  ~  ~  |
| A3 ~  ~  ~  ~  ~  | F3 ~  ~  ~  ~  ~  |
| G3 ~  F3 ~  E3 ~  | C3 ~  ~  ~  ~  ~  |
"""

PERCUSSION = """
                                  .  .  |
| X  .  X  X  X  .  | X  .  X  .  X  .  |
| X  .  X  X  X  .  | X  .  X  .  X  .  |
| X  .  X  X  X  .  | X  .  X  .  X  .  |
| X  X  X  .  X  .  | X  .  X  X  X  ~  |
| ~
"""


def demo_request(sample_rate: int) -> SynthesisRequest:
    """Three-part arrangement: triangle melody, square bass, noise hits."""
    return SynthesisRequest(
        sample_rate=sample_rate,
        speed=0.6,
        pitch_shift=0.0,
        volume=0.01,
        parts={
            "melody": PartSpec(notes=MELODY, waveform="triangle", volume=2.0, fade=0.6),
            "harmony": PartSpec(notes=HARMONY, waveform="square", volume=0.2, fade=0.2),
            "percussion": PartSpec(notes=PERCUSSION, waveform="white_noise", volume=0.3, fade=0.9),
        },
    )
