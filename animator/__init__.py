"""
Mood-aware news animation pipeline.

Turns a news article into a narrated, subtitled 3D animation by chaining
external text, image, video and speech services and assembling the results
with ffmpeg.
"""
__version__ = "0.1.0"
