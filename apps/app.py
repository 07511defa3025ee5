# -*- coding: utf-8 -*-
from typing import Any, Dict, List, Optional, Tuple

import gradio as gr

from transi.config import get_config
from transi.container import get_container
from transi.domain.models import GeoLocation, Question
from transi.logging_setup import configure_logging
from transi.ports.nlp import IntentClassifierPort
from transi.ports.stops import StopDirectoryPort
from transi.services import Dispatcher

EXAMPLES: List[List[Any]] = [
    ["next bus from A4", None, None],
    ["are there any live buses near me?", 50.3703, -4.1430],
    ["how much is a ticket to Exeter?", None, None],
    ["how do I get to the Barbican?", 50.3714, -4.1425],
    ["what's the weather like in Plymouth?", None, None],
    ["I lost my wallet on the bus", None, None],
]


def _question(text: str, lat: Optional[float], lon: Optional[float]) -> Question:
    return Question(text=text or "", location=GeoLocation.parse(lat, lon))


def answer_question(
    text: str,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> Tuple[str, str, Dict[str, Any]]:
    container = get_container()
    question = _question(text, lat, lon)

    if question.is_empty:
        intent_label = "-"
    else:
        intents = container.resolve(IntentClassifierPort).classify(question.text)
        intent_label = " > ".join(intent.name for intent in intents)

    answer = container.resolve(Dispatcher).answer(question)
    header = f"🤖 Intent: {intent_label}\n"
    if answer.source:
        header += f"📡 Source: {answer.source}\n"
    return header + "\n" + answer.text, intent_label, dict(answer.data or {})


def stop_table() -> List[List[Any]]:
    stops = get_container().resolve(StopDirectoryPort).list_stops()
    return [
        [stop.code, stop.atco_code, stop.name, stop.location.latitude, stop.location.longitude]
        for stop in stops
    ]


# ============================ UI ============================
with gr.Blocks(title="Transi Autopilot") as app:
    gr.Markdown(
        """
# 🚍 Transi Autopilot
Ask about buses, fares, journeys or the weather around Plymouth & the South West.
"""
    )

    with gr.Row():
        text_input = gr.Textbox(
            label="📝 Question", lines=2, placeholder="e.g. next bus from A4"
        )
    with gr.Row():
        lat_input = gr.Number(label="📍 Latitude", value=None)
        lon_input = gr.Number(label="📍 Longitude", value=None)

    btn = gr.Button("🚀 Ask")

    with gr.Row():
        output = gr.Textbox(label="💬 Answer", lines=8)
        data_view = gr.JSON(label="📊 Data")
    intent_view = gr.Textbox(label="🤖 Intent ranking", lines=1)

    btn.click(
        answer_question,
        inputs=[text_input, lat_input, lon_input],
        outputs=[output, intent_view, data_view],
    )
    gr.Examples(EXAMPLES, inputs=[text_input, lat_input, lon_input])

    gr.Markdown("## 🚏 Known stops")
    gr.Dataframe(
        value=stop_table,
        headers=["code", "atco_code", "name", "lat", "lon"],
        interactive=False,
    )


if __name__ == "__main__":
    configure_logging(get_config().observability)
    app.launch()
