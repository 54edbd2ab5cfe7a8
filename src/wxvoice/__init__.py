"""wxvoice - Spoken aviation weather for radio and telephony endpoints.

wxvoice turns a raw METAR/SPECI report into an announcement:
- Decoding into a validated Observation
- Text in brief, detailed, aviation or speech style
- Speech from eSpeak (offline) or Google Cloud TTS
- Audio as WAV, MP3, OGG, μ-law, A-law or GSM

Usage:
    weather KSJC -f detailed
    speak-weather google KSJC -f aviation -a ulaw -o /tmp/wx.ulaw
"""

__version__ = "0.1.0"

from .config import WxVoiceConfig
from .config.loader import load_config
from .pipeline import CancellationToken, PipelineResult, PipelineState, WeatherPipeline

__all__ = [
    "CancellationToken",
    "PipelineResult",
    "PipelineState",
    "WeatherPipeline",
    "WxVoiceConfig",
    "__version__",
    "load_config",
]
