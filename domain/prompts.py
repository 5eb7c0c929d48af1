DESCRIBE_PROMPT = (
    "Heute Mittag gibt es {dish} zu essen. "
    "Ich kann mir leider nichts darunter vorstellen. "
    "Bitte beschreibe mir dieses Gericht. "
    "Bitte verzichte auf Höflichkeitsformen in deiner Antwort wie z.B. Gerne!"
)

IMAGE_PROMPT = "Generiere ein Bild von {dish}"
