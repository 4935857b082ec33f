import os
import json
from typing import Any, Optional

import google.generativeai as genai
from dotenv import load_dotenv


def _p(verbose: bool, *args, **kwargs):
    if verbose:
        print(*args, **kwargs)


def call_gemini_api(
    prompt: str,
    *,
    model_name: str = "gemini-2.5-flash",
    response_mime_type: str = "application/json",
    verbose: bool = True,
) -> Optional[str]:
    """
    Invoke the Gemini LLM API with a data-cleaning prompt.

    This function loads API credentials from environment variables,
    configures the Gemini client, and submits a prompt requesting a
    JSON-formatted response. It is the only place in the package that
    talks to the network.

    Args:
        prompt (str): Fully constructed prompt.
        model_name (str): Gemini model identifier.
        response_mime_type (str): Expected response MIME type.
        verbose (bool): Whether to print diagnostic messages.

    Returns:
        Optional[str]: Raw text response from the LLM, or None if the
        request fails or no API key is configured.
    """
    load_dotenv()
    api_key = os.getenv("GOOGLE_API_KEY")
    if not api_key:
        _p(verbose, "API Error: GOOGLE_API_KEY not set.")
        return None

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name)

    try:
        response = model.generate_content(
            prompt,
            generation_config={"response_mime_type": response_mime_type},
        )
        return response.text
    except Exception as e:
        _p(verbose, f"API Error: {e}")
        return None


def extract_json(text: Optional[str]) -> Optional[Any]:
    """
    Extract and parse JSON from an LLM response.

    This function cleans common Markdown code-fence wrappers and
    attempts to deserialize the remaining content. Both objects and
    arrays are accepted; callers check the shape they expect.

    Args:
        text (Optional[str]): Raw text response from the LLM.

    Returns:
        Optional[Any]: Parsed JSON value if successful, otherwise None.
    """
    if not text:
        return None
    try:
        return json.loads(
            text.strip()
                .replace("```json", "")
                .replace("```", "")
        )
    except ValueError:
        return None
