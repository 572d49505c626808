"""fpb - FFmpeg progress bar.

Wraps ffmpeg, replacing its diagnostic output with a live progress line
while passing arguments, prompts and exit status straight through.
"""

__version__ = "0.1.0"
