import gradio as gr

from review_exporter import settings
from review_exporter.handlers import (
    FILE_STATUS_HEADERS,
    clear_files_handler,
    export_data_handler,
    handle_files_upload,
    load_sample_data_handler,
    preview_handler,
)
from review_exporter.options import (
    ALL_RATINGS_LABEL,
    DEFAULT_SELECTION,
    FIELD_LABELS,
    FIELD_ORDER,
    rating_filter_choices,
)

settings.setup_logging()

# --- UI Definition ---
with gr.Blocks(title="Review Data Exporter") as demo:
    gr.Markdown("# Review Data Exporter")
    gr.Markdown("Import JSON review data and export to Excel/CSV")

    # State
    collection_state = gr.State()
    file_count_state = gr.State(value=0)

    with gr.Tab("Upload"):
        gr.Markdown("### 1. Import")
        file_input = gr.File(
            label="Upload your JSON review file(s)",
            file_types=[".json"],
            file_count="multiple",
            type="filepath",
        )
        with gr.Row():
            sample_btn = gr.Button("Try with Sample Data")
            clear_btn = gr.Button("Clear All")
        status_msg = gr.Textbox(label="Status", interactive=False)
        file_status = gr.Dataframe(
            headers=FILE_STATUS_HEADERS,
            datatype=["str", "str", "number"],
            col_count=(3, "fixed"),
            interactive=False,
            label="Selected Files",
        )

    with gr.Tab("Preview & Export"):
        with gr.Row():
            with gr.Column(scale=1):
                review_summary = gr.Textbox(label="Reviews", interactive=False)
                rating_breakdown = gr.Textbox(label="Ratings", interactive=False)

                gr.Markdown("### 2. Filter")
                rating_filter = gr.Dropdown(
                    label="Filter by Rating",
                    choices=rating_filter_choices(),
                    value=ALL_RATINGS_LABEL,
                    interactive=True,
                )

                gr.Markdown("### 3. Fields to Export")
                field_selector = gr.CheckboxGroup(
                    label="Fields to Export",
                    choices=[FIELD_LABELS[name] for name in FIELD_ORDER],
                    value=[FIELD_LABELS[name] for name in FIELD_ORDER if DEFAULT_SELECTION[name]],
                )

            with gr.Column(scale=2):
                gr.Markdown("### 4. Preview")
                preview_table = gr.Dataframe(interactive=False, label="Preview")
                preview_note = gr.Markdown()

                gr.Markdown("### 5. Export")
                output_filename = gr.Textbox(label="Output Filename (optional)", placeholder=settings.EXPORT_FILENAME)
                export_btn = gr.Button("Export to Excel (CSV)", variant="primary")
                download_output = gr.File(label="Download Result")
                export_status = gr.Textbox(label="Export Status", interactive=False)

    ingest_outputs = [collection_state, file_count_state, file_status, status_msg, review_summary, rating_breakdown]
    preview_inputs = [collection_state, rating_filter, field_selector]
    preview_outputs = [preview_table, preview_note]

    file_input.upload(
        fn=handle_files_upload,
        inputs=[file_input],
        outputs=ingest_outputs,
    ).then(fn=preview_handler, inputs=preview_inputs, outputs=preview_outputs)

    sample_btn.click(
        fn=load_sample_data_handler,
        inputs=None,
        outputs=ingest_outputs,
    ).then(fn=preview_handler, inputs=preview_inputs, outputs=preview_outputs)

    clear_btn.click(
        fn=clear_files_handler,
        inputs=None,
        outputs=ingest_outputs,
    ).then(fn=lambda: (None, None, ""), inputs=None, outputs=[file_input, preview_table, preview_note])

    rating_filter.change(fn=preview_handler, inputs=preview_inputs, outputs=preview_outputs)
    field_selector.change(fn=preview_handler, inputs=preview_inputs, outputs=preview_outputs)

    export_btn.click(
        fn=export_data_handler,
        inputs=[collection_state, rating_filter, field_selector, output_filename],
        outputs=[download_output, export_status],
    )

if __name__ == "__main__":
    demo.launch(server_name=settings.SERVER_NAME, server_port=settings.SERVER_PORT)
