import time
from typing import Optional, Dict, Any, List, Tuple, Type, TypeVar
from collections import defaultdict

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError as SchemaValidationError

from exam_timetabler.errors import GenerationError
from exam_timetabler.utils.config import GOOGLE_API_KEY, IS_GEMINI_CONFIGURED, RUN_NAME
from exam_timetabler.utils.file_io import extract_json_from_response
from exam_timetabler.utils.logger import DetailedLogger

SchemaT = TypeVar("SchemaT", bound=BaseModel)

class BaseAgent:
    def __init__(self, agent_name: str, model_name: str, logger: Optional[DetailedLogger] = None):
        self.agent_name = agent_name
        self.model_name = model_name
        self.logger = logger or DetailedLogger(agent_name=agent_name, run_name=RUN_NAME)

    def call_llm(
        self,
        prompt: str,
        log_context: Dict[str, Any],
        response_schema: Type[SchemaT],
        attachments: Optional[List[types.Part]] = None,
    ) -> Tuple[SchemaT, Dict[str, float]]:
        """
        Sends one prompt to Gemini and validates the JSON answer against `response_schema`.

        Exactly one request is made; there are no retries. Any failure (missing key,
        provider/network error, empty or undecodable response, schema mismatch)
        is raised as GenerationError with the original exception as its cause.
        """
        if not IS_GEMINI_CONFIGURED:
            self.logger.log("CRITICAL_ERROR", {**log_context, "summary": "Gemini API key missing."})
            raise GenerationError("Gemini API key missing.")

        metrics = defaultdict(float)
        start_time = time.time()
        try:
            client = genai.Client(api_key=GOOGLE_API_KEY)

            config = types.GenerateContentConfig(
                thinking_config=types.ThinkingConfig(thinking_budget=-1, include_thoughts=True),
                response_mime_type="application/json",
                response_schema=response_schema
            )
            parts = [types.Part.from_text(text=prompt), *(attachments or [])]
            contents = [types.Content(role="user", parts=parts)]

            response_chunks = client.models.generate_content_stream(
                model=self.model_name,
                contents=contents,
                config=config
            )

            response_text = ""
            final_chunk = None

            for chunk in response_chunks:
                if chunk.candidates and chunk.candidates[0].content:
                    for part in chunk.candidates[0].content.parts or []:
                        if getattr(part, 'thought', False):
                            self.logger.log("LLM_THOUGHT_SUMMARY", {
                                **log_context,
                                "summary": "Reasoning",
                                "thought_summary": part.text
                            })
                        elif part.text:
                            response_text += part.text
                final_chunk = chunk
        except Exception as e:
            self.logger.log("ERROR", {**log_context, "summary": f"LLM call failed: {e!r}"})
            raise GenerationError("Gemini call failed.", cause=e) from e

        metrics['duration'] = time.time() - start_time
        metrics['calls'] = 1

        if final_chunk is not None and final_chunk.usage_metadata:
            meta = final_chunk.usage_metadata
            metrics['in_tokens'] = meta.prompt_token_count or 0
            metrics['out_tokens'] = meta.candidates_token_count or 0
            metrics['think_tokens'] = getattr(meta, 'thoughts_token_count', 0) or 0
            metrics['total_tokens'] = meta.total_token_count or 0

        self.logger.log("LLM_RAW_OUTPUT_TEXT", {
            **log_context,
            "summary": f"Response ({len(response_text)} chars)",
            "raw_response_str": response_text
        })
        self.logger.log("METRICS", {**log_context, "summary": "LLM call metrics", **metrics})

        json_text = extract_json_from_response(response_text)
        if not json_text:
            self.logger.log("ERROR", {**log_context, "summary": "LLM response contained no JSON."})
            raise GenerationError("Gemini returned no JSON payload.")

        try:
            validated_obj = response_schema.model_validate_json(json_text)
        except SchemaValidationError as e:
            self.logger.log("ERROR", {**log_context, "summary": f"LLM response failed schema validation: {e}"})
            raise GenerationError("Gemini returned a malformed response.", cause=e) from e

        return validated_obj, dict(metrics)
