"""Avatar states and sizes, builtin presets, the preset manager and ANSI parsing."""