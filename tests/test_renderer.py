from sillycode import Color, Style, StyleKind, Text, parse, render
from sillycode import constants


def markup(token):
    return f'<span class="sillycode-markup">{token}</span>'


def test_render_nothing():
    assert render([]) == "<div><br></div>"


def test_render_normal_text():
    assert render(parse("normal text")) == "<div>normal text</div>"


def test_render_bold_text():
    assert render(parse("[b]bold text[/b]")) == "<div><strong>bold text</strong></div>"


def test_render_every_style():
    assert render(parse("[b]b[/b][i]i[/i][u]u[/u][s]s[/s]")) == (
        "<div><strong>b</strong><em>i</em><ins>u</ins><del>s</del></div>"
    )


def test_render_bold_italics_and_emote():
    assert render(parse("[b]BE EXTRA [i]SILLY[/i][/b] [:D]")) == (
        '<div><strong>BE EXTRA <em>SILLY</em></strong> '
        '<img class="sillycode-emote" src="/static/emoticons/colond.png" alt="colond"></div>'
    )


def test_render_colored_text():
    assert render(parse("[color=#ff0000]this text is red[/color]")) == (
        '<div><span style="color: #ff0000">this text is red</span></div>'
    )


def test_render_link():
    assert render(parse("check this out: [url]https://example.com[/url]")) == (
        '<div>check this out: <a href="https://example.com">https://example.com</a></div>'
    )


def test_render_colored_link():
    assert render(parse("[color=#ff0000]i love red links: [url]https://example.com[/url][/color]")) == (
        '<div><span style="color: #ff0000">i love red links: '
        '<a href="https://example.com">https://example.com</a></span></div>'
    )


def test_render_link_with_styles_inside():
    assert render(parse("[url][b]bold[/b]! wow![/url]")) == (
        '<div><a href="https://bold! wow!"><strong>bold</strong>! wow!</a></div>'
    )


def test_render_link_ignores_emote():
    assert render(parse("[url]face: [:(][/url]")) == (
        '<div><a href="https://face:">face: '
        '<img class="sillycode-emote" src="/static/emoticons/sad.png" alt="sad"></a></div>'
    )


def test_render_nested_links():
    assert render(parse("[url]this is a link: [url]https://example.com[/url][/url]")) == (
        '<div><a href="https://this is a link: https://example.com">this is a link: '
        '<a href="https://example.com">https://example.com</a></a></div>'
    )


def test_render_link_keeps_its_protocol():
    assert render(parse("[url]HTTP://example.com[/url]")) == (
        '<div><a href="HTTP://example.com">HTTP://example.com</a></div>'
    )


def test_render_link_href_is_trimmed():
    assert render(parse("[url]  example.com  [/url]")) == (
        '<div><a href="https://example.com">  example.com  </a></div>'
    )


def test_render_link_ends_where_it_closes():
    assert render(parse("[url]a[color=#000000]b[/url]c[/color]")) == (
        '<div><a href="https://ab">a<span style="color: #000000">b</span></a>'
        '<span style="color: #000000">c</span></div>'
    )


def test_render_many_links_get_their_own_hrefs():
    source = "".join(f"[url]link{i}[/url]" for i in range(12))
    html = render(parse(source))
    for i in range(12):
        assert f'<a href="https://link{i}">link{i}</a>' in html


def test_render_placeholder_lookalikes_are_left_alone():
    lookalike = f"{constants.hrefStartChar}HREF0{constants.hrefEndChar}"
    assert render(parse(f"[url]x[/url] {lookalike}")) == (
        f'<div><a href="https://x">x</a> {lookalike}</div>'
    )


def test_render_multiple_colors():
    assert render(parse("[color=#ff0000]this text is red [color=#00ff00]and this is green[/color][/color]")) == (
        '<div><span style="color: #ff0000">this text is red '
        '<span style="color: #00ff00">and this is green</span></span></div>'
    )


def test_render_multiple_lines():
    assert render(parse("this text is on\nmultiple lines")) == (
        "<div>this text is on</div><div>multiple lines</div>"
    )


def test_render_multiple_lines_with_blank_lines():
    assert render(parse("line 1\nline 2\n\nline 4\n")) == (
        "<div>line 1</div><div>line 2</div><div><br></div><div>line 4</div><div><br></div>"
    )


def test_render_multiple_lines_with_styling_and_blank_trailing_line():
    assert render(parse("make it [b]bold\n and [i]italics[/i][/b]\n")) == (
        "<div>make it <strong>bold</strong></div>"
        "<div><strong> and <em>italics</em></strong></div><div><br></div>"
    )


def test_render_leading_space_stays_visible():
    assert render(parse(" indented")) == "<div>&nbsp;indented</div>"


def test_render_link_spans_multiple_lines():
    assert render(parse("[url]https://example.com\nthis is a link[/url] teehee")) == (
        '<div><a href="https://example.comthis is a link">https://example.com</a></div>'
        '<div><a href="https://example.comthis is a link">this is a link</a> teehee</div>'
    )


def test_render_color_spans_multiple_lines():
    assert render(parse("[color=#123456]a\nb")) == (
        '<div><span style="color: #123456">a</span></div>'
        '<div><span style="color: #123456">b</span></div>'
    )


def test_render_incorrectly_nested_tags():
    assert render(parse("this [b]text has [i]weird[/b] nest[/i]ing")) == (
        "<div>this <strong>text has <em>weird</em></strong><em> nest</em>ing</div>"
    )


def test_render_incorrectly_nested_tags_reopen_in_order():
    assert render(parse("[b]a[i]b[u]c[/b]d[/u][/i]")) == (
        "<div><strong>a<em>b<ins>c</ins></em></strong><em><ins>d</ins></em></div>"
    )


def test_render_closing_color_closes_the_newest():
    assert render(parse("[color=#111111]a[color=#222222]b[b]c[/color]d[/color]e")) == (
        '<div><span style="color: #111111">a<span style="color: #222222">b<strong>c</strong></span>'
        "<strong>d</strong></span><strong>e</strong></div>"
    )


def test_render_is_repeatable():
    parts = parse("this [b]text has [i]weird[/b] nest[/i]ing [url]x[/url]")
    assert render(parts) == render(parts)
    assert render(parts, True) == render(parts, True)


def test_render_unterminated_tag():
    assert render(parse("this [b]text has an unterminated tag")) == (
        "<div>this <strong>text has an unterminated tag</strong></div>"
    )


def test_render_unterminated_tag_with_multiple_lines():
    assert render(parse("this [b]text has an unterminated tag\nand this is the second line")) == (
        "<div>this <strong>text has an unterminated tag</strong></div>"
        "<div><strong>and this is the second line</strong></div>"
    )


def test_render_unexpected_closing_tag():
    assert render(parse("this [b]text has an unexpected[/i] closing tag[b]")) == (
        "<div>this <strong>text has an unexpected closing tag</strong></div>"
    )


def test_render_unmatched_parts():
    parts = [Style(StyleKind.LINK, False), Color(False), Text("x"), Style(StyleKind.BOLD, False)]
    assert render(parts) == "<div>x</div>"


def test_render_evil_html():
    assert render(parse("i am so evil <script>alert('hello')</script>")) == (
        "<div>i am so evil &lt;script&gt;alert(&#39;hello&#39;)&lt;/script&gt;</div>"
    )


def test_render_even_more_evil_html():
    source = (
        "please let me [url]<script>alert('hello')</script>[/url] smuggle "
        "\\<iframe src='https://example.com'\\>\\</iframe\\> something in"
    )
    assert render(parse(source)) == (
        '<div>please let me <a href="https://&lt;script&gt;alert(&#39;hello&#39;)&lt;/script&gt;">'
        "&lt;script&gt;alert(&#39;hello&#39;)&lt;/script&gt;</a> smuggle "
        "&lt;iframe src=&#39;https://example.com&#39;&gt;&lt;/iframe&gt; something in</div>"
    )


def test_render_evil_link():
    assert render(parse("[url]javascript:fetch('/css/lua').then(r=>r.text()).then(eval)[/url]")) == (
        '<div><a href="https://javascript:fetch(&#39;/css/lua&#39;).then(r=&gt;r.text()).then(eval)">'
        "javascript:fetch(&#39;/css/lua&#39;).then(r=&gt;r.text()).then(eval)</a></div>"
    )


def test_render_quotes_cant_escape_href():
    assert render(parse('[url]x" onclick="evil()[/url]')) == (
        '<div><a href="https://x&quot; onclick=&quot;evil()">x&quot; onclick=&quot;evil()</a></div>'
    )


def test_render_escaped_backslash():
    assert render(parse("check out this backslash: \\\\")) == "<div>check out this backslash: \\</div>"


def test_render_escaped_normal_character():
    assert render(parse("wow [i]that[/i] is \\a normal character")) == (
        "<div>wow <em>that</em> is a normal character</div>"
    )


def test_render_escaped_tag():
    assert render(parse("this text is \\[b]not bold[/b]")) == "<div>this text is [b]not bold</div>"


def test_render_unexpected_backslash_at_end_of_input():
    assert render(parse("the backslash \\\\ at the end of this input should be ignored \\")) == (
        "<div>the backslash \\ at the end of this input should be ignored <br></div>"
    )


def test_render_escaped_newline_ignores_backslash_and_does_nothing():
    assert render(parse("this text is on\\\nmultiple lines\n")) == (
        "<div>this text is on</div><div>multiple lines</div><div><br></div>"
    )


def test_render_show_markup():
    assert render(parse("this [b]text[/b] has [i]markup rendered[/i] and \\[url] all that \\"), True) == (
        f"<div>this {markup('[b]')}<strong>text</strong>{markup('[/b]')} has "
        f"{markup('[i]')}<em>markup rendered</em>{markup('[/i]')} and "
        f"{markup(chr(92))}[url] all that {markup(chr(92))}</div>"
    )


def test_render_show_markup_with_multiple_lines():
    assert render(parse("this [b]text\nhas[/b] [i]markup rendered[/i]"), True) == (
        f"<div>this {markup('[b]')}<strong>text</strong></div>"
        f"<div><strong>has</strong>{markup('[/b]')} "
        f"{markup('[i]')}<em>markup rendered</em>{markup('[/i]')}</div>"
    )


def test_render_show_markup_for_links_and_colors():
    assert render(parse("[color=#ABCDEF][url]x[/url][/color]"), True) == (
        f'<div>{markup("[color=#abcdef]")}<span style="color: #abcdef">'
        f'{markup("[url]")}<a href="https://x">x</a>{markup("[/url]")}'
        f'</span>{markup("[/color]")}</div>'
    )


def test_render_show_markup_for_unmatched_toggles():
    # The tokens still show, even when they change nothing.
    assert render(parse("[/b]x[b][b]"), True) == (
        f"<div>{markup('[/b]')}x{markup('[b]')}<strong>{markup('[b]')}</strong></div>"
    )


def test_render_show_markup_with_emote():
    assert render(parse("this text has an emote [:3]"), True) == (
        '<div>this text has an emote <span class="sillycode-emote" '
        'style="background-image: url(/static/emoticons/colonthree.png)">[:3]</span></div>'
    )


def test_render_emote_path_is_configurable(monkeypatch):
    monkeypatch.setattr(constants, "emotePath", "/img")
    assert render(parse("[;)]")) == '<div><img class="sillycode-emote" src="/img/winking.png" alt="winking"></div>'
