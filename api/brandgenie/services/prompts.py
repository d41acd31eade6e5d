PALETTE_SYSTEM = """You are a JSON API that returns ONLY valid JSON. You are an expert branding consultant who specializes in color palette generation.

CRITICAL: Return ONLY a raw JSON object. No markdown, no code blocks, no explanations, no text before or after.

Return JSON in this EXACT format:
{
  "palettes": [
    {
      "palette_name": "string",
      "description": "short description of the palette's mood",
      "colors": ["#RRGGBB", "#RRGGBB", "#RRGGBB", "#RRGGBB", "#RRGGBB"]
    }
  ]
}

Every palette must have exactly 5 colors written as 6-digit hex codes.
Your entire response must be valid JSON that starts with { and ends with }"""

PALETTE_USER = """Based on the brand information, generate {count} distinct and diverse color palettes. Each palette should explore a different mood or direction (e.g., one professional and serious, one vibrant and energetic, one calm and minimalist, one luxurious and elegant). Each palette must have exactly 5 colors.
For each palette, provide a unique palette name, a short description, and an array of 5 hex color codes.

Brand Name: {brand_name}
Industry: {industry}
Keywords for Style & Personality: {keywords}
Target Audience: {target_audience}
Core Message/Values: {core_message}
Competitors to differentiate from: {competitors}
Things to avoid: {avoid}"""

BRAND_NAMES_SYSTEM = """You are a JSON API that returns ONLY valid JSON. You are a branding expert specializing in creating catchy and memorable brand names.

CRITICAL: Return ONLY a raw JSON object. No markdown, no code blocks, no explanations.

Return JSON in this EXACT format:
{
  "names": ["name 1", "name 2", "name 3", "name 4", "name 5"]
}

Your entire response must be valid JSON that starts with { and ends with }"""

BRAND_NAMES_USER = """Based on the following brand information, generate 5 creative and relevant brand name ideas.
The names should be unique, easy to pronounce, and suitable for the target audience. Please provide a diverse list of names.

Brand Information:
- Industry: {industry}
- Personality Keywords: {keywords}
- Target Audience: {target_audience}
- Core Message: {core_message}
- Competitors to avoid sounding like: {competitors}
- Words/styles to avoid: {avoid}"""

GUIDELINES_SYSTEM = """You are a JSON API that returns ONLY valid JSON. You are a branding expert writing basic brand guidelines.

CRITICAL: Return ONLY a raw JSON object. No markdown, no code blocks, no explanations.

Return JSON in this EXACT format:
{
  "color_usage": "string",
  "logo_usage": "string",
  "typography_usage": "string",
  "brand_voice": {
    "summary": "2-3 sentence summary of the brand voice",
    "attributes": ["adjective", "adjective", "adjective", "adjective"],
    "dos": ["at least 3 do examples"],
    "donts": ["at least 3 don't examples"],
    "contextual_tone": [
      {"context": "Social Media Post", "tone": "string"},
      {"context": "Customer Support Email", "tone": "string"}
    ]
  }
}

Your entire response must be valid JSON that starts with { and ends with }"""

GUIDELINES_USER = """Based on the provided brand information, generate a set of basic brand guidelines.

Brand Information:
- Brand Name: {brand_name}
- Industry: {industry}
- Personality Keywords: {keywords}
- Target Audience: {target_audience}
- Core Message: {core_message}
- Competitors: {competitors}
- Things to Avoid: {avoid}

Selected Assets:
- Color Palette Name: {palette_name}
- Palette Description: {palette_description}
- Colors: {colors}
- Headline Font: {headline_font}
- Body Font: {body_font}

Generate the following guidelines:

1. Color Usage: Briefly explain the role of the primary, accent, and background colors. Give simple advice on achieving good contrast.
2. Logo Usage: Provide two or three simple, actionable rules for using the logo, such as clear space and not distorting the logo.
3. Typography Usage: Describe the intended use for the headline font and the body font.
4. Brand Voice: a summary, exactly 4 attributes, at least 3 dos and 3 don'ts, and at least 2 contextual tone examples."""

LOGO_PROMPT = """Create a logo visualization for the brand "{brand_name}" in the "{industry}" industry, using the following color palette: {colors}. {description_clause}The logo should be on a clean background, include the brand name, and reflect the brand's industry."""

LOGO_DESCRIPTION_CLAUSE = 'The user described the logo concept as: "{logo_description}". '

SOCIAL_MOCKUP_PROMPT = """Create a mockup of a social media post (Instagram or Facebook) showcasing the brand colors and the provided logo for {brand_name}. Use primary color {primary_color} and accent color {accent_color}. The mockup should look professional and engaging."""

BUSINESS_CARD_PROMPT = """Create a mockup of a professional, modern business card for the brand "{brand_name}".
The business card should feature the provided logo.
It should also include placeholder contact information:
- Name: Jane Doe
- Title: Creative Director
- Phone: (555) 123-4567
- Email: jane.doe@{domain}.com
- Website: www.{domain}.com

Use the following brand guidelines:
- Primary Color: {primary_color}
- Accent Color: {accent_color}
- Background Color: {background_color}
- Headline Font: {headline_font} (for the name and title)
- Body Font: {body_font} (for contact details)

The design should be clean, professional, and visually appealing. Ensure good contrast and readability."""

WEBSITE_THEME_PROMPT = """Create a website theme preview (hero section, buttons, typography) for {brand_name} using {primary_color} (primary), {background_color} (background), {accent_color} (accent), {headline_font} (headline font), and {body_font} (body font). Provide the result as a single image with a clean and modern design."""
