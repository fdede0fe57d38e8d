"""
Story and illustration constants for the illustrated book pipeline.
"""

# Scene planning and prompt bounds
STORY_CONSTANTS = {
    "min_scenes": 5,
    "max_scenes": 7,
    "min_section_length": 50,  # sections must be longer than this to count
    "min_sentence_length": 20,  # fallback key moment sentence length
    "key_moment_fallback_chars": 200,
    "max_prompt_length": 1500,
    "min_scene_description_length": 50,
    "truncation_buffer": 100,
    "default_image_size": "1024x1024",
    "default_image_style": "vivid",
    "title_max_length": 60,
}

# Retry and fallback timing (seconds)
RETRY_CONSTANTS = {
    "max_retries": 3,
    "initial_delay": 1.0,
    "max_delay": 10.0,
    "backoff_multiplier": 2.0,
    "fallback_max_retries": 1,
    "fallback_initial_delay": 0.5,
    "fallback_max_delay": 2.0,
    "fallback_timeout": 90.0,
}
