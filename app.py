from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from flask import Flask, jsonify, request

from news_trends import (
    DetailLevel,
    MissingCredentialsError,
    PipelineOptions,
    TrendConfig,
    TrendPipeline,
    TrendRequest,
)
from news_trends.models import SortOrder, clamp_int

PipelineFactory = Callable[[TrendConfig], TrendPipeline]


def create_app(config: Optional[TrendConfig] = None, pipeline_factory: Optional[PipelineFactory] = None) -> Flask:
    app = Flask(__name__)
    trend_config = config or TrendConfig.from_env()
    build_pipeline = pipeline_factory or TrendPipeline.from_config

    def _pipeline() -> TrendPipeline:
        trend_config.require_credentials()
        return build_pipeline(trend_config)

    @app.get("/health")
    def healthcheck():
        return {"status": "ok"}

    @app.post("/api/retail/trending")
    def retail_trending():
        try:
            payload = _json_body()
            trend_request = TrendRequest.from_payload(payload)
            options = PipelineOptions(
                diversity_selection=_parse_flag(payload.get("diversity"), trend_config.diversity_selection),
                detail_level=_parse_detail_level(payload.get("detailLevel")),
            )
            pipeline = _pipeline()
            report = pipeline.run(trend_request, options)
            return jsonify(report.to_dict())
        except MissingCredentialsError as exc:
            return jsonify({"error": str(exc), "missing": exc.missing}), 503
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        except Exception as exc:  # pragma: no cover - runtime guard
            app.logger.exception("Uncaught exception when handling /api/retail/trending")
            return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 500

    @app.post("/api/summarize")
    def summarize():
        try:
            payload = _json_body()
            query = payload.get("query")
            if not isinstance(query, str) or not query.strip():
                raise ValueError("`query` is required")
            trend_request = TrendRequest(
                days=clamp_int(payload.get("days"), 1, 1, 30),
                pages=1,
                page_size=clamp_int(payload.get("pageSize"), 10, 1, 50),
                query=query.strip(),
                language=payload.get("language") if isinstance(payload.get("language"), str) else None,
            )
            options = PipelineOptions(
                diversity_selection=False,
                detail_level=DetailLevel.OVERALL,
                sort_orders=(SortOrder.RECENCY,),
            )
            pipeline = _pipeline()
            report = pipeline.run(trend_request, options)
            return jsonify(
                {
                    "summary": report.summary,
                    "articles": [article.to_dict() for article in report.scored_articles],
                }
            )
        except MissingCredentialsError as exc:
            return jsonify({"error": str(exc), "missing": exc.missing}), 503
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400
        except Exception as exc:  # pragma: no cover - runtime guard
            app.logger.exception("Uncaught exception when handling /api/summarize")
            return jsonify({"error": "Unexpected server error", "detail": str(exc)}), 500

    return app


def _json_body() -> Mapping[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


def _parse_flag(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise ValueError("`diversity` must be a boolean")


def _parse_detail_level(value: object) -> DetailLevel:
    if value is None:
        return DetailLevel.CLUSTERED
    try:
        return DetailLevel(value)
    except ValueError:
        choices = ", ".join(level.value for level in DetailLevel)
        raise ValueError(f"`detailLevel` must be one of: {choices}") from None


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    app.run(debug=True, host="0.0.0.0", port=8008)
