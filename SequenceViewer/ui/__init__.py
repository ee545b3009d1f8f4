"""UI components (PySide6).

    - viewer/: SequenceViewerWindow and the QtRenderer adapter
    - widgets/: ImageLabel
    - dialogs/: HelpDialog
    - utils/: display pipeline (channel, clamp, intensity window, mapping)

Submodules are imported on demand so that the display pipeline can be used
without loading Qt widgets.
"""
